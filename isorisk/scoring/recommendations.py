"""
Per-tier recommendations attached to a RiskResult.
"""

from typing import Dict, List, Optional, Tuple

from shared.schemas.assessment import OverlapAnalysis, RiskTier


# Overlap (percent) above which the high tier names the closest region
SIGNIFICANT_OVERLAP = 50.0

TIER_RECOMMENDATIONS: Dict[RiskTier, Tuple[str, ...]] = {
    RiskTier.CRITICAL: (
        "Recommend rejecting shipment or intensive verification",
        "Isotope data suggests Xinjiang or Central Asia origin",
        "High probability of CBP detention and forced labor concerns",
    ),
    RiskTier.HIGH: (
        "Request additional supplier documentation",
        "Consider independent supply chain audit",
        "Prepare for potential CBP scrutiny",
    ),
    RiskTier.MEDIUM: (
        "Strengthen traceability documentation",
        "Consider third-party certification",
        "Maintain detailed import records",
    ),
    RiskTier.LOW: (
        "Maintain current documentation standards",
        "Continue periodic isotope testing",
        "Keep supply chain transparent",
    ),
}


def recommendations_for(
    tier: RiskTier,
    overlap: Optional[OverlapAnalysis] = None,
) -> List[str]:
    """Recommendation lines for a tier."""
    tier = RiskTier(tier)
    lines = list(TIER_RECOMMENDATIONS[tier])
    if (
        tier == RiskTier.HIGH
        and overlap is not None
        and overlap.overlap_percent > SIGNIFICANT_OVERLAP
    ):
        lines.append(f"Significant isotopic overlap with {overlap.closest_high_risk}")
    return lines
