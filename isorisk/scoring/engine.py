"""
IsoRisk Scoring Engine
======================

Combines supply-chain answers, declared geography and isotopic overlap
into a single risk score and tier.

    total = supply_chain + geographic + isotope

Missing but well-typed inputs never raise: an empty country scores 0
geographic points and a missing overlap analysis scores 0 isotope points.
Whether that is acceptable is the caller's decision.

Usage:
    from isorisk.scoring.engine import RiskScoreCalculator

    calculator = RiskScoreCalculator()
    result = calculator.score(
        answers={"supplier_identified": "no"},
        declared_country="China",
    )
    print(result.total, result.tier)

Author: IsoRisk Team
Version: 1.0.0
"""

from typing import Mapping, Optional, Sequence

from isorisk.geography.catalog import DEFAULT_CATALOG, RiskCatalog
from isorisk.logging import get_logger
from isorisk.scoring.overlap import IsotopicOverlapAnalyzer
from isorisk.scoring.questionnaire import AnswerValue, supply_chain_score
from isorisk.scoring.recommendations import recommendations_for
from isorisk.scoring.rules import RiskScoringRules
from shared.schemas.assessment import (
    IsotopeProfile,
    OverlapAnalysis,
    ReferenceProfile,
    RiskResult,
    ScoreBreakdown,
)


logger = get_logger(__name__)


class RiskScoreCalculator:
    """
    Multi-factor compliance risk score.

    Holds no per-call state: identical inputs always give identical results.

    Attributes:
        catalog: Questionnaire, geographic table and reference profiles
        rules: Isotope point rules and tier thresholds
        analyzer: Overlap analyzer used by ``assess``

    Example:
        calculator = RiskScoreCalculator()
        profile = IsotopeProfile(mean=28.0, min=25.0, max=31.0)
        result = calculator.assess(answers, "India", declared_profile=profile)
    """

    def __init__(
        self,
        catalog: Optional[RiskCatalog] = None,
        rules: Optional[RiskScoringRules] = None,
        analyzer: Optional[IsotopicOverlapAnalyzer] = None,
    ):
        self.catalog = catalog or DEFAULT_CATALOG
        self.rules = rules or RiskScoringRules()
        self.analyzer = analyzer or IsotopicOverlapAnalyzer()

    def score(
        self,
        answers: Optional[Mapping[str, AnswerValue]],
        declared_country: Optional[str],
        overlap: Optional[OverlapAnalysis] = None,
    ) -> RiskResult:
        """
        Score a shipment.

        Args:
            answers: Question id -> yes/no/unknown (missing ids count as unknown)
            declared_country: Declared country of origin (may be empty)
            overlap: Isotopic overlap analysis, if a profile was available

        Returns:
            RiskResult

        Raises:
            InvalidInputError: If an answer is not yes/no/unknown
        """
        breakdown = ScoreBreakdown(
            supply_chain=supply_chain_score(answers, self.catalog.questions),
            geographic=self.catalog.geographic_score(declared_country),
            isotope=self.rules.isotope_score(overlap),
        )
        total = breakdown.total
        tier = self.rules.classify_risk_tier(total)

        logger.info(
            "risk_scored",
            declared_country=declared_country or None,
            supply_chain=breakdown.supply_chain,
            geographic=breakdown.geographic,
            isotope=breakdown.isotope,
            total=total,
            tier=tier.value,
        )

        return RiskResult(
            total=total,
            tier=tier,
            breakdown=breakdown,
            overlap_analysis=overlap,
            recommendations=recommendations_for(tier, overlap),
        )

    def analyze_overlap(
        self,
        declared_profile: IsotopeProfile,
        references: Optional[Sequence[ReferenceProfile]] = None,
    ) -> OverlapAnalysis:
        """Overlap of a declared profile with the catalog (or given) references."""
        if references is None:
            references = self.catalog.reference_profiles
        return self.analyzer.analyze(declared_profile, references)

    def assess(
        self,
        answers: Optional[Mapping[str, AnswerValue]],
        declared_country: Optional[str] = "",
        declared_profile: Optional[IsotopeProfile] = None,
        references: Optional[Sequence[ReferenceProfile]] = None,
    ) -> RiskResult:
        """
        Run the overlap analysis (when a profile is available) and score.

        Args:
            answers: Question id -> yes/no/unknown
            declared_country: Declared country of origin (may be empty)
            declared_profile: Declared δ18O profile, from lookup or direct entry
            references: Override for the catalog's reference profiles

        Returns:
            RiskResult, with ``overlap_analysis`` None when no profile was given
        """
        overlap = None
        if declared_profile is not None:
            overlap = self.analyze_overlap(declared_profile, references)
        return self.score(answers, declared_country, overlap)
