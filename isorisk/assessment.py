"""
Assessment Service
==================

End-to-end flow for one shipment:

    declared country ──► lookup service ──► IsotopeProfile ─┐
    direct δ18O entry ──────────────────► IsotopeProfile ─┤
                                                          ▼
    questionnaire answers ───────────► RiskScoreCalculator ──► RiskResult
                                                          │
    lot parameters ──────────────► SamplingProtocolGenerator ──► ProtocolPair

The scoring and sampling steps are pure. Only the country lookup does I/O.

Author: IsoRisk Team
Version: 1.0.0
"""

from typing import Mapping, Optional

from isorisk.geography.profiles import profile_from_direct_entry
from isorisk.integrations.geography_client import GeographyClient
from isorisk.logging import get_logger, set_assessment_id
from isorisk.sampling.protocol import SamplingProtocolGenerator, default_sampling_level
from isorisk.scoring.engine import RiskScoreCalculator
from isorisk.scoring.questionnaire import AnswerValue
from shared.schemas.assessment import RiskResult
from shared.schemas.protocol import (
    ProtocolPair,
    SamplingLevel,
    TestLocation,
    Traceability,
)


logger = get_logger(__name__)


class AssessmentService:
    """
    Coordinates profile lookup, scoring and protocol generation.

    Attributes:
        calculator: Risk score calculator
        generator: Sampling protocol generator
        geography: Lookup client (only needed for country-based assessments)
    """

    def __init__(
        self,
        calculator: Optional[RiskScoreCalculator] = None,
        generator: Optional[SamplingProtocolGenerator] = None,
        geography: Optional[GeographyClient] = None,
    ):
        self.calculator = calculator or RiskScoreCalculator()
        self.generator = generator or SamplingProtocolGenerator()
        self.geography = geography

    async def assess_country(
        self,
        answers: Optional[Mapping[str, AnswerValue]],
        country: str,
        region: Optional[str] = None,
        assessment_id: Optional[str] = None,
    ) -> RiskResult:
        """
        Score a shipment declared by country (and optional region).

        When the lookup has no profile the isotope term is omitted and
        ``overlap_analysis`` is None.
        """
        set_assessment_id(assessment_id)
        profile = None
        if self.geography is not None and country:
            profile = await self.geography.fetch_profile(country, region)
            if profile is None:
                logger.info("no_isotope_profile", country=country, region=region)
        return self.calculator.assess(answers, country, declared_profile=profile)

    def assess_direct(
        self,
        answers: Optional[Mapping[str, AnswerValue]],
        mean: float,
        min_value: float,
        max_value: float,
        sd: Optional[float] = None,
        country: str = "",
        assessment_id: Optional[str] = None,
    ) -> RiskResult:
        """
        Score a shipment from directly entered δ18O values.

        Raises:
            InvalidInputError: If the entered profile is inconsistent
        """
        set_assessment_id(assessment_id)
        profile = profile_from_direct_entry(mean, min_value, max_value, sd)
        return self.calculator.assess(answers, country, declared_profile=profile)

    def generate_protocols(
        self,
        result: RiskResult,
        lot_size: int,
        colors: int,
        sizes: int,
        sampling_level: Optional[SamplingLevel] = None,
        test_location: TestLocation = TestLocation.GARMENT,
        traceability: Traceability = Traceability.BATCH,
    ) -> ProtocolPair:
        """
        Testing protocols for a scored shipment.

        The sampling level defaults to the one suggested by the result's tier.
        """
        level = sampling_level or default_sampling_level(result.tier)
        return self.generator.generate(
            lot_size=lot_size,
            colors=colors,
            sizes=sizes,
            risk_tier=result.tier,
            sampling_level=level,
            test_location=test_location,
            traceability=traceability,
        )
