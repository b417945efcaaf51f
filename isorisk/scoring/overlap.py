"""
Isotopic Overlap Analyzer
=========================

Compares a declared δ18O profile against known high-risk reference
profiles using interval geometry and standardized mean distance.

For each reference:
    - overlap = |declared ∩ reference| / |declared| * 100, clamped to [0, 100]
      (a zero-width declared range divides by 1)
    - distance = |declared.mean - reference.mean| / declared.sd

The reference set is configuration data. Nothing here knows any region
by name.

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
from typing import List, Optional, Sequence

from isorisk.config import settings
from isorisk.exceptions import InvalidInputError
from shared.schemas.assessment import (
    IsotopeProfile,
    OverlapAnalysis,
    ReferenceComparison,
    ReferenceProfile,
)


logger = logging.getLogger(__name__)


def overlap_percent(declared: IsotopeProfile, reference: IsotopeProfile) -> float:
    """Share of the declared range covered by the reference range, in percent."""
    intersection = max(0.0, min(declared.max, reference.max) - max(declared.min, reference.min))
    width = declared.width or 1
    return min(100.0, max(0.0, intersection / width * 100))


def standardized_distance(declared: IsotopeProfile, reference: IsotopeProfile) -> float:
    """Distance between means in units of the declared SD."""
    return abs(declared.mean - reference.mean) / declared.sd


class IsotopicOverlapAnalyzer:
    """
    Declared-vs-reference isotope comparison.

    Attributes:
        separability_threshold: Minimum distance (in SDs) for "separable"
    """

    def __init__(self, separability_threshold: Optional[float] = None):
        self.separability_threshold = (
            settings.separability_threshold_sd
            if separability_threshold is None
            else separability_threshold
        )

    def analyze(
        self,
        declared: IsotopeProfile,
        references: Sequence[ReferenceProfile],
    ) -> OverlapAnalysis:
        """
        Analyze a declared profile against the reference set.

        The closest reference is the one with the smallest distance; ties
        go to the earliest reference in ``references``.

        Args:
            declared: Declared origin's profile
            references: High-risk references, in comparison order

        Returns:
            OverlapAnalysis

        Raises:
            InvalidInputError: If ``references`` is empty
        """
        if not references:
            raise InvalidInputError("overlap analysis needs at least one reference profile")

        comparisons: List[ReferenceComparison] = [
            ReferenceComparison(
                name=ref.name,
                overlap_percent=overlap_percent(declared, ref.profile),
                distance_sd=standardized_distance(declared, ref.profile),
            )
            for ref in references
        ]

        max_overlap = max(c.overlap_percent for c in comparisons)

        closest = comparisons[0]
        for comparison in comparisons[1:]:
            if comparison.distance_sd < closest.distance_sd:
                closest = comparison

        analysis = OverlapAnalysis(
            declared_profile=declared,
            overlap_percent=max_overlap,
            closest_high_risk=closest.name,
            closest_overlap_percent=closest.overlap_percent,
            distance_sd=closest.distance_sd,
            separable=closest.distance_sd > self.separability_threshold,
            comparisons=comparisons,
            high_risk_profiles=list(references),
        )

        logger.debug(
            f"Overlap analysis: max overlap {max_overlap:.1f}%, closest "
            f"{closest.name} at {closest.distance_sd:.2f} SD"
        )
        return analysis
