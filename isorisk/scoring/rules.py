"""
IsoRisk Scoring Rules
=====================

Point rules for the isotope term and the tier thresholds.

Scoring Philosophy:
    - Supply chain: opaque supply chains score more points
    - Geography: declared countries with known forced-labour exposure
      score more points
    - Isotope: the declared origin's δ18O range overlapping, or sitting
      close to, a high-risk region's range scores more points; clear
      separation earns a deduction

The two isotope signals (overlap magnitude and mean distance) are added
together, so a declaration can collect both the top overlap and the top
distance points.

Tiers (inclusive upper bounds):
    - total <= 30  -> low
    - total <= 60  -> medium
    - total <= 100 -> high
    - otherwise    -> critical

Author: IsoRisk Team
Version: 1.0.0
"""

from typing import Optional

from shared.schemas.assessment import OverlapAnalysis, RiskTier


class RiskScoringRules:
    """
    Point rules for the isotope term and tier classification.

    Usage:
        rules = RiskScoringRules()
        points = rules.isotope_score(analysis)
        tier = RiskScoringRules.classify_risk_tier(points + 40)
    """

    # =========================================================================
    # Overlap Thresholds (percent of declared range) -> points
    # =========================================================================

    OVERLAP_POINTS = (
        (80.0, 60),
        (50.0, 30),
        (20.0, 15),
    )

    # =========================================================================
    # Distance Thresholds (declared SDs)
    # =========================================================================

    DISTANCE_VERY_CLOSE = 0.5
    DISTANCE_VERY_CLOSE_POINTS = 40
    DISTANCE_CLOSE = 1.0
    DISTANCE_CLOSE_POINTS = 20
    DISTANCE_SEPARATED = 2.0
    DISTANCE_SEPARATED_POINTS = -10

    # =========================================================================
    # Tier Thresholds (inclusive upper bounds)
    # =========================================================================

    TIER_LOW_MAX = 30
    TIER_MEDIUM_MAX = 60
    TIER_HIGH_MAX = 100

    def overlap_points(self, overlap_percent: float) -> int:
        """Points for the largest overlap with any high-risk range."""
        for threshold, points in self.OVERLAP_POINTS:
            if overlap_percent > threshold:
                return points
        return 0

    def distance_points(self, distance_sd: float) -> int:
        """Points for the standardized distance to the closest high-risk mean."""
        if distance_sd < self.DISTANCE_VERY_CLOSE:
            return self.DISTANCE_VERY_CLOSE_POINTS
        elif distance_sd < self.DISTANCE_CLOSE:
            return self.DISTANCE_CLOSE_POINTS
        elif distance_sd > self.DISTANCE_SEPARATED:
            return self.DISTANCE_SEPARATED_POINTS
        return 0

    def isotope_score(self, overlap: Optional[OverlapAnalysis]) -> int:
        """
        Combined isotope term.

        Args:
            overlap: Analysis of the declared profile, or None without one

        Returns:
            Overlap points plus distance points (0 without an analysis)
        """
        if overlap is None:
            return 0
        return (
            self.overlap_points(overlap.overlap_percent)
            + self.distance_points(overlap.distance_sd)
        )

    @classmethod
    def classify_risk_tier(cls, total: int) -> RiskTier:
        """
        Classify a total score into a risk tier.

        Args:
            total: Total score (may be negative)

        Returns:
            RiskTier
        """
        if total <= cls.TIER_LOW_MAX:
            return RiskTier.LOW
        elif total <= cls.TIER_MEDIUM_MAX:
            return RiskTier.MEDIUM
        elif total <= cls.TIER_HIGH_MAX:
            return RiskTier.HIGH
        return RiskTier.CRITICAL
