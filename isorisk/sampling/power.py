"""
Detection Power Estimator
=========================

Probability of catching at least one non-conforming unit when sampling
without replacement from a finite lot.

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
import math

from isorisk.exceptions import InvalidInputError
from isorisk.sampling.combinatorics import hypergeometric_pmf


logger = logging.getLogger(__name__)

# Power is never reported as certain
MAX_REPORTED_POWER = 99


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def detection_power(
    sample_size: int,
    lot_size: int,
    defect_rate: float = 0.05,
) -> int:
    """
    Detection power in whole percent, capped at 99.

    Assumes ``floor(lot_size * defect_rate)`` defective units in the lot and
    sums the hypergeometric probabilities of drawing 1..min(n, k) of them.

    Args:
        sample_size: Units drawn (> 0); clamped to the lot size
        lot_size: Units in the lot (> 0)
        defect_rate: Assumed defective fraction, in [0, 1]

    Returns:
        Integer percent in [0, 99]

    Raises:
        InvalidInputError: On non-positive sizes or a rate outside [0, 1]
    """
    if sample_size <= 0:
        raise InvalidInputError(f"sample size must be positive, got {sample_size}")
    if lot_size <= 0:
        raise InvalidInputError(f"lot size must be positive, got {lot_size}")
    if not 0.0 <= defect_rate <= 1.0:
        raise InvalidInputError(f"defect rate must be within [0, 1], got {defect_rate}")

    defectives = math.floor(lot_size * defect_rate)
    if defectives == 0:
        return 0

    draws = min(sample_size, lot_size)
    p_detect = 0.0
    for x in range(1, min(draws, defectives) + 1):
        p_detect += hypergeometric_pmf(x, lot_size, defectives, draws)

    power = min(round_half_up(p_detect * 100), MAX_REPORTED_POWER)
    logger.debug(
        f"Detection power n={draws} N={lot_size} k={defectives}: "
        f"p={p_detect:.6f} -> {power}%"
    )
    return power


class DetectionPowerEstimator:
    """
    Detection power with a configured default defect rate.

    Usage:
        estimator = DetectionPowerEstimator()
        estimator.power(sample_size=20, lot_size=5000)
    """

    def __init__(self, defect_rate: float = 0.05):
        if not 0.0 <= defect_rate <= 1.0:
            raise InvalidInputError(f"defect rate must be within [0, 1], got {defect_rate}")
        self.defect_rate = defect_rate

    def power(self, sample_size: int, lot_size: int, defect_rate: float = None) -> int:
        rate = self.defect_rate if defect_rate is None else defect_rate
        return detection_power(sample_size, lot_size, rate)
