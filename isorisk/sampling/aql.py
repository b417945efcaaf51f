"""
AQL Sampling Table
==================

ANSI/ASQ Z1.4-2018, General Inspection Level II, single sampling.

The table stores the AQL 1.0 rows only. Looser AQL values keep the same
tier boundaries and accept/reject numbers and scale the sample size:

    AQL 1.0 -> x1.0
    AQL 2.5 -> x0.6  (rounded up, minimum 2)
    AQL 4.0 -> x0.3  (rounded up, minimum 2)

Lot sizes outside the table clamp to the nearest tier, so a lookup
always yields a row.

Usage:
    from isorisk.sampling.aql import DEFAULT_AQL_TABLE

    row = DEFAULT_AQL_TABLE.lookup(5000, 1.0)
    row.sample_size  # 200

Author: IsoRisk Team
Version: 1.0.0
"""

import math
from fractions import Fraction
from typing import Dict, Sequence, Tuple

from isorisk.exceptions import InvalidInputError
from shared.schemas.protocol import AQLRow


MIN_SAMPLE_SIZE = 2

# AQL value -> sample-size multiplier applied to the AQL 1.0 row
AQL_SAMPLE_MULTIPLIERS: Dict[float, str] = {
    1.0: "1.0",
    2.5: "0.6",
    4.0: "0.3",
}

# (lot min, lot max or None, n, Ac, Re)
_LEVEL_II_AQL_1_0: Tuple[Tuple, ...] = (
    (2, 8, 2, 0, 1),
    (9, 15, 3, 0, 1),
    (16, 25, 5, 0, 1),
    (26, 50, 8, 0, 1),
    (51, 90, 13, 0, 1),
    (91, 150, 20, 0, 1),
    (151, 280, 32, 1, 2),
    (281, 500, 50, 1, 2),
    (501, 1200, 80, 2, 3),
    (1201, 3200, 125, 3, 4),
    (3201, 10000, 200, 5, 6),
    (10001, 35000, 315, 7, 8),
    (35001, None, 500, 10, 11),
)


def scale_sample_size(sample_size: int, multiplier) -> int:
    """
    Scale a sample size, rounding up, never below two units.

    The product is taken in exact rational arithmetic so 20 x 0.3 is 6,
    not 6.000000000000001.
    """
    scaled = Fraction(sample_size) * Fraction(str(multiplier))
    return max(MIN_SAMPLE_SIZE, math.ceil(scaled))


class AQLTable:
    """
    Immutable lot-size tier table.

    Attributes:
        rows: Tiers ordered by lot size, AQL 1.0 sample sizes
    """

    def __init__(self, rows: Sequence[AQLRow]):
        if not rows:
            raise InvalidInputError("AQL table needs at least one row")
        self.rows: Tuple[AQLRow, ...] = tuple(
            sorted(rows, key=lambda row: row.lot_range_min)
        )

    def base_row(self, lot_size: int) -> AQLRow:
        """
        Tier row (AQL 1.0) for a lot size.

        Raises:
            InvalidInputError: If lot_size is not positive
        """
        if lot_size <= 0:
            raise InvalidInputError(f"lot size must be positive, got {lot_size}")

        for row in self.rows:
            if row.contains(lot_size):
                return row

        # Outside every tier: clamp to the nearest end of the table
        if lot_size < self.rows[0].lot_range_min:
            return self.rows[0]
        return self.rows[-1]

    def lookup(self, lot_size: int, aql: float = 1.0) -> AQLRow:
        """
        Sampling row for a lot size at the given AQL.

        Args:
            lot_size: Units in the lot (> 0)
            aql: One of 1.0, 2.5, 4.0

        Returns:
            AQLRow with the scaled sample size

        Raises:
            InvalidInputError: On a non-positive lot size or unsupported AQL
        """
        multiplier = aql_multiplier(aql)
        row = self.base_row(lot_size)
        if multiplier == "1.0":
            return row
        return row.model_copy(
            update={"sample_size": scale_sample_size(row.sample_size, multiplier)}
        )


def aql_multiplier(aql: float) -> str:
    """Sample-size multiplier for an AQL value."""
    try:
        return AQL_SAMPLE_MULTIPLIERS[float(aql)]
    except (KeyError, TypeError, ValueError):
        supported = ", ".join(str(value) for value in AQL_SAMPLE_MULTIPLIERS)
        raise InvalidInputError(
            f"unsupported AQL {aql!r}; expected one of {supported}"
        ) from None


DEFAULT_AQL_TABLE = AQLTable([
    AQLRow(
        lot_range_min=low,
        lot_range_max=high,
        sample_size=n,
        accept_number=ac,
        reject_number=re,
    )
    for low, high, n, ac, re in _LEVEL_II_AQL_1_0
])
