"""
Sampling Protocol Generator
===========================

Builds the two alternative isotope testing protocols for a lot:

    - AQL protocol: Z1.4 tier sample per colour, scaled by sampling rigor,
      pooled by colour, with detection power and cost
    - Colour x size protocol: one sample per colour (low risk) or per
      colour/size combination, pooled by colour

Risk tier drives the reported confidence level and the colour x size
sample count. Sampling level drives the AQL and the sample multiplier.

Usage:
    from isorisk.sampling.protocol import SamplingProtocolGenerator

    generator = SamplingProtocolGenerator()
    pair = generator.generate(
        lot_size=5000, colors=3, sizes=4,
        risk_tier=RiskTier.HIGH, sampling_level=SamplingLevel.HIGH,
    )

Author: IsoRisk Team
Version: 1.0.0
"""

from typing import Dict, Optional, Tuple

from isorisk.config import settings
from isorisk.exceptions import InvalidInputError
from isorisk.logging import get_logger
from isorisk.sampling.aql import AQLTable, DEFAULT_AQL_TABLE, scale_sample_size
from isorisk.sampling.pooling import PoolingOptimizer
from isorisk.sampling.power import DetectionPowerEstimator
from shared.schemas.assessment import RiskTier
from shared.schemas.protocol import (
    ColorSizeProtocol,
    CostEstimate,
    DecisionThresholds,
    PoolingPlan,
    ProtocolPair,
    SamplingLevel,
    TestingProtocol,
    TestLocation,
    Traceability,
)


logger = get_logger(__name__)


# Reporting-only confidence figure (percent) per risk tier
CONFIDENCE_BY_TIER: Dict[RiskTier, int] = {
    RiskTier.LOW: 1,
    RiskTier.MEDIUM: 2,
    RiskTier.HIGH: 4,
    RiskTier.CRITICAL: 4,
}

# Sampling level -> (AQL, sample multiplier)
AQL_BY_SAMPLING_LEVEL: Dict[SamplingLevel, Tuple[float, str]] = {
    SamplingLevel.LOW: (4.0, "0.3"),
    SamplingLevel.MEDIUM: (2.5, "0.6"),
    SamplingLevel.HIGH: (1.0, "1.0"),
}

# Low-risk colour x size sampling spreads samples over at most this many sizes
LOW_RISK_SIZES_USED = 2


def default_sampling_level(risk_tier: RiskTier) -> SamplingLevel:
    """Sampling rigor suggested for a risk tier."""
    risk_tier = RiskTier(risk_tier)
    if risk_tier == RiskTier.LOW:
        return SamplingLevel.LOW
    if risk_tier == RiskTier.MEDIUM:
        return SamplingLevel.MEDIUM
    return SamplingLevel.HIGH


class SamplingProtocolGenerator:
    """
    Generates AQL and colour x size testing protocols.

    Attributes:
        aql_table: Lot-size tier table
        pooling: Dorfman pooling optimizer
        power_estimator: Hypergeometric detection power
        cost_per_test: Laboratory cost of one test
        defect_rate: Assumed defective fraction for pooling and power
    """

    def __init__(
        self,
        aql_table: Optional[AQLTable] = None,
        cost_per_test: Optional[float] = None,
        defect_rate: Optional[float] = None,
    ):
        self.aql_table = aql_table or DEFAULT_AQL_TABLE
        self.cost_per_test = (
            settings.cost_per_test if cost_per_test is None else cost_per_test
        )
        self.defect_rate = (
            settings.expected_defect_rate if defect_rate is None else defect_rate
        )
        if self.cost_per_test < 0:
            raise InvalidInputError(
                f"cost per test must not be negative, got {self.cost_per_test}"
            )
        self.pooling = PoolingOptimizer(self.defect_rate)
        self.power_estimator = DetectionPowerEstimator(self.defect_rate)

    def generate(
        self,
        lot_size: int,
        colors: int,
        sizes: int,
        risk_tier: RiskTier,
        sampling_level: SamplingLevel,
        test_location: TestLocation = TestLocation.GARMENT,
        traceability: Traceability = Traceability.BATCH,
    ) -> ProtocolPair:
        """
        Generate both protocols for a lot.

        Args:
            lot_size: Units in the shipment (> 0)
            colors: Distinct colours (> 0)
            sizes: Distinct sizes (> 0)
            risk_tier: Tier from the risk score
            sampling_level: Sampling rigor
            test_location: Finished garments or fabric rolls
            traceability: Batch- or SKU-level traceability

        Returns:
            ProtocolPair with the AQL and colour x size protocols

        Raises:
            InvalidInputError: If any lot parameter is not positive
        """
        self._validate_lot(lot_size, colors, sizes)
        risk_tier = RiskTier(risk_tier)
        sampling_level = SamplingLevel(sampling_level)
        test_location = TestLocation(test_location)
        traceability = Traceability(traceability)

        if test_location == TestLocation.FABRIC and traceability != Traceability.SKU:
            logger.warning(
                "fabric_testing_without_sku_traceability",
                lot_size=lot_size,
                traceability=traceability.value,
            )

        pair = ProtocolPair(
            aql_protocol=self.aql_protocol(
                lot_size, colors, sizes, risk_tier, sampling_level,
                test_location, traceability,
            ),
            color_size_protocol=self.color_size_protocol(colors, sizes, risk_tier),
        )

        logger.info(
            "protocols_generated",
            lot_size=lot_size,
            risk_tier=risk_tier.value,
            sampling_level=sampling_level.value,
            aql_samples=pair.aql_protocol.total_samples,
            aql_tests=pair.aql_protocol.pooling.tests_required,
            color_size_samples=pair.color_size_protocol.samples,
        )
        return pair

    def aql_protocol(
        self,
        lot_size: int,
        colors: int,
        sizes: int,
        risk_tier: RiskTier,
        sampling_level: SamplingLevel,
        test_location: TestLocation = TestLocation.GARMENT,
        traceability: Traceability = Traceability.BATCH,
    ) -> TestingProtocol:
        """AQL-based protocol: tier sample per colour, pooled by colour."""
        self._validate_lot(lot_size, colors, sizes)
        risk_tier = RiskTier(risk_tier)
        sampling_level = SamplingLevel(sampling_level)

        aql, multiplier = AQL_BY_SAMPLING_LEVEL[sampling_level]
        row = self.aql_table.base_row(lot_size)
        samples_per_color = scale_sample_size(row.sample_size, multiplier)
        total_samples = samples_per_color * colors

        pooling = self.pooling.plan(total_samples, colors)
        power = self.power_estimator.power(samples_per_color, lot_size)

        return TestingProtocol(
            lot_size=lot_size,
            colors=colors,
            sizes=sizes,
            aql=aql,
            samples_per_color=samples_per_color,
            total_samples=total_samples,
            pooling=pooling,
            power=power,
            cost=self._cost(total_samples, pooling),
            decision_thresholds=DecisionThresholds(
                accept=row.accept_number,
                reject=row.reject_number,
            ),
            confidence_level=CONFIDENCE_BY_TIER[risk_tier],
            risk_tier=risk_tier,
            sampling_level=sampling_level,
            test_location=TestLocation(test_location),
            traceability=Traceability(traceability),
        )

    def color_size_protocol(
        self,
        colors: int,
        sizes: int,
        risk_tier: RiskTier,
    ) -> ColorSizeProtocol:
        """Colour x size protocol, pooled by colour."""
        if colors <= 0 or sizes <= 0:
            raise InvalidInputError(
                f"colors and sizes must be positive, got colors={colors} sizes={sizes}"
            )
        risk_tier = RiskTier(risk_tier)

        if risk_tier == RiskTier.LOW:
            samples = colors
            sizes_used = min(LOW_RISK_SIZES_USED, sizes)
            description = (
                f"Test every color ({colors}) using {sizes_used} different sizes "
                f"= {samples} samples"
            )
        else:
            samples = colors * sizes
            sizes_used = sizes
            lead = "Test every color" if risk_tier == RiskTier.MEDIUM else "Test all colors"
            description = f"{lead} ({colors}) x all sizes ({sizes}) = {samples} samples"

        pooling = self.pooling.plan(samples, colors)
        return ColorSizeProtocol(
            samples=samples,
            sizes_used=sizes_used,
            description=description,
            pooling=pooling,
            cost=self._cost(samples, pooling),
        )

    def _cost(self, samples: int, pooling: PoolingPlan) -> CostEstimate:
        return CostEstimate(
            unpooled=samples * self.cost_per_test,
            pooled=pooling.tests_required * self.cost_per_test,
        )

    @staticmethod
    def _validate_lot(lot_size: int, colors: int, sizes: int) -> None:
        if lot_size <= 0:
            raise InvalidInputError(f"lot size must be positive, got {lot_size}")
        if colors <= 0 or sizes <= 0:
            raise InvalidInputError(
                f"colors and sizes must be positive, got colors={colors} sizes={sizes}"
            )
