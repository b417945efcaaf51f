"""
Testing Protocol Schemas
========================

Value objects produced by the acceptance-sampling side of the engine.

Key Components:
    - AQLRow: One ANSI/ASQ Z1.4 lot-size tier
    - PoolingPlan: Dorfman two-stage pooling summary
    - TestingProtocol: AQL-based protocol for a lot
    - ColorSizeProtocol: Colour x size protocol computed from the same inputs
    - ProtocolPair: Both protocols, returned together

Author: IsoRisk Team
Version: 1.0.0
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from shared.schemas.assessment import RiskTier


class SamplingLevel(str, Enum):
    """Sampling rigor chosen for a lot."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TestLocation(str, Enum):
    """What physically gets sampled."""

    __test__ = False

    GARMENT = "garment"
    """Finished imported garments"""

    FABRIC = "fabric"
    """Fabric rolls, before cutting"""


class Traceability(str, Enum):
    """Granularity at which samples can be traced back to product."""

    BATCH = "batch"
    SKU = "sku"


class AQLRow(BaseModel):
    """
    A lot-size tier of the sampling table.

    ``lot_range_max`` is None for the open-ended last tier.
    """

    model_config = ConfigDict(frozen=True)

    lot_range_min: int = Field(..., ge=1)
    lot_range_max: Optional[int] = Field(default=None, ge=1)
    sample_size: int = Field(..., ge=1)
    accept_number: int = Field(..., ge=0)
    reject_number: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_numbers(self) -> "AQLRow":
        """Reject number is always one above the accept number."""
        if self.reject_number != self.accept_number + 1:
            raise ValueError("reject_number must equal accept_number + 1")
        if self.lot_range_max is not None and self.lot_range_max < self.lot_range_min:
            raise ValueError("lot_range_max must not be below lot_range_min")
        return self

    def contains(self, lot_size: int) -> bool:
        if lot_size < self.lot_range_min:
            return False
        return self.lot_range_max is None or lot_size <= self.lot_range_max


class PoolingPlan(BaseModel):
    """Expected effort of a Dorfman two-stage pooling strategy."""

    model_config = ConfigDict(frozen=True)

    pools: int = Field(..., ge=1, description="Number of pooled first-stage tests")
    tests_required: int = Field(..., ge=1, description="Expected total tests")
    savings_percent: int = Field(
        ...,
        le=100,
        description="Tests saved vs. testing every sample (can be negative)"
    )


class CostEstimate(BaseModel):
    """Testing cost with and without pooling."""

    model_config = ConfigDict(frozen=True)

    unpooled: float = Field(..., ge=0.0)
    pooled: float = Field(..., ge=0.0)


class DecisionThresholds(BaseModel):
    """Accept the lot at or below ``accept`` failures, reject at ``reject`` or more."""

    model_config = ConfigDict(frozen=True)

    accept: int = Field(..., ge=0)
    reject: int = Field(..., ge=1)


class TestingProtocol(BaseModel):
    """
    AQL-based isotope testing protocol for one lot.

    Attributes:
        lot_size: Units in the shipment
        colors: Distinct colours (each is sampled separately)
        sizes: Distinct sizes
        aql: AQL value the sample size was derived from
        samples_per_color: Adjusted per-colour sample size
        total_samples: samples_per_color * colors
        pooling: Pooling plan over total_samples, grouped by colour
        power: Detection power in percent, capped at 99
        cost: Unpooled and pooled cost
        decision_thresholds: Accept/reject numbers from the AQL tier
        confidence_level: Risk-tier driven reporting figure (percent)
    """

    __test__ = False

    model_config = ConfigDict(frozen=True)

    lot_size: int = Field(..., ge=1)
    colors: int = Field(..., ge=1)
    sizes: int = Field(..., ge=1)
    aql: float
    samples_per_color: int = Field(..., ge=1)
    total_samples: int = Field(..., ge=1)
    pooling: PoolingPlan
    power: int = Field(..., ge=0, le=99)
    cost: CostEstimate
    decision_thresholds: DecisionThresholds
    confidence_level: int
    risk_tier: RiskTier
    sampling_level: SamplingLevel
    test_location: TestLocation = TestLocation.GARMENT
    traceability: Traceability = Traceability.BATCH


class ColorSizeProtocol(BaseModel):
    """Protocol that samples by colour and size instead of by AQL tier."""

    model_config = ConfigDict(frozen=True)

    samples: int = Field(..., ge=1)
    sizes_used: int = Field(..., ge=1)
    description: str
    pooling: PoolingPlan
    cost: CostEstimate


class ProtocolPair(BaseModel):
    """Both protocols for one lot, so a caller can present either."""

    model_config = ConfigDict(frozen=True)

    aql_protocol: TestingProtocol
    color_size_protocol: ColorSizeProtocol

    def to_plan_summary(self, generated_at: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Flatten the pair into the mitigation-plan record stored with an assessment.

        Args:
            generated_at: Timestamp to record (defaults to now, UTC)

        Returns:
            JSON-serializable dictionary
        """
        aql = self.aql_protocol
        color_size = self.color_size_protocol
        stamp = generated_at or datetime.now(timezone.utc)
        return {
            "generated": True,
            "timestamp": stamp.isoformat(),
            "lot_size": aql.lot_size,
            "colors": aql.colors,
            "sizes": aql.sizes,
            "sampling_level": aql.sampling_level.value,
            "total_samples": aql.total_samples,
            "samples_per_color": aql.samples_per_color,
            "estimated_cost": aql.cost.pooled,
            "confidence_level": aql.confidence_level,
            "aql": aql.aql,
            "test_location": aql.test_location.value,
            "color_size_samples": color_size.samples,
            "color_size_pooled_cost": color_size.cost.pooled,
        }
