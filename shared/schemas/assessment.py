"""
Risk Assessment Schemas
=======================

Value objects produced and consumed by the risk-scoring side of the engine.

Key Components:
    - IsotopeProfile: δ18O summary (mean/min/max/sd) of a region or sample
    - ReferenceProfile: Named high-risk reference region
    - Answer / SupplyChainQuestion: Questionnaire model
    - OverlapAnalysis: Declared profile vs. high-risk references
    - RiskTier / ScoreBreakdown / RiskResult: Final risk score

All models are frozen: a result is never patched, it is recomputed.

Usage:
    from shared.schemas.assessment import IsotopeProfile

    profile = IsotopeProfile(mean=25.0, min=20.0, max=30.0)
    profile.sd  # 2.5, estimated as (max - min) / 4

Author: IsoRisk Team
Version: 1.0.0
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class IsotopeProfile(BaseModel):
    """
    δ18O summary statistics in per-mille.

    Built either from a geography lookup or from direct user entry.
    When ``sd`` is omitted (or zero) it is estimated as a quarter
    of the range, which treats min/max as roughly ±2 SD.

    Attributes:
        mean: Mean δ18O value
        min: Minimum δ18O value
        max: Maximum δ18O value
        sd: Standard deviation (> 0)
        median: Optional median carried through from the lookup service
        q25: Optional 25th percentile
        q75: Optional 75th percentile
    """

    model_config = ConfigDict(frozen=True)

    mean: float = Field(..., description="Mean δ18O (‰)")
    min: float = Field(..., description="Minimum δ18O (‰)")
    max: float = Field(..., description="Maximum δ18O (‰)")
    sd: float = Field(..., gt=0.0, description="Standard deviation (‰)")
    median: Optional[float] = Field(default=None, description="Median δ18O (‰)")
    q25: Optional[float] = Field(default=None, description="25th percentile (‰)")
    q75: Optional[float] = Field(default=None, description="75th percentile (‰)")

    @model_validator(mode="before")
    @classmethod
    def estimate_sd(cls, data: Any) -> Any:
        """Fill in sd from the range when it is missing or zero."""
        if not isinstance(data, dict):
            return data
        sd = data.get("sd")
        if sd is None or (isinstance(sd, (int, float)) and sd == 0):
            low, high = data.get("min"), data.get("max")
            # Non-numeric bounds are left to field validation
            if not isinstance(low, (int, float)) or not isinstance(high, (int, float)):
                return {key: value for key, value in data.items() if key != "sd"}
            estimate = (high - low) / 4
            if estimate <= 0:
                raise ValueError(
                    "sd cannot be estimated from a zero-width range; supply sd explicitly"
                )
            data = {**data, "sd": estimate}
        return data

    @model_validator(mode="after")
    def check_ordering(self) -> "IsotopeProfile":
        """Enforce min <= mean <= max."""
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        if not self.min <= self.mean <= self.max:
            raise ValueError(
                f"mean ({self.mean}) lies outside the range [{self.min}, {self.max}]"
            )
        return self

    @property
    def width(self) -> float:
        """Width of the min/max interval."""
        return self.max - self.min


class ReferenceProfile(BaseModel):
    """A known high-risk region and its isotope profile."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Region name")
    profile: IsotopeProfile


class Answer(str, Enum):
    """Questionnaire answer values."""

    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"


class SupplyChainQuestion(BaseModel):
    """
    A supply-chain transparency question with its fixed point table.

    Higher points mean less transparency and therefore more risk.
    """

    model_config = ConfigDict(frozen=True)

    question_id: str = Field(..., min_length=1)
    text: str = Field(default="")
    points: Dict[Answer, int] = Field(
        ...,
        description="Points awarded for each answer value"
    )

    @model_validator(mode="after")
    def check_points(self) -> "SupplyChainQuestion":
        """Every answer value must have a point value."""
        missing = [a.value for a in Answer if a not in self.points]
        if missing:
            raise ValueError(
                f"question {self.question_id!r} has no points for: {', '.join(missing)}"
            )
        return self

    def points_for(self, answer: Answer) -> int:
        return self.points[answer]


class ReferenceComparison(BaseModel):
    """Overlap and distance between the declared profile and one reference."""

    model_config = ConfigDict(frozen=True)

    name: str
    overlap_percent: float = Field(..., ge=0.0, le=100.0)
    distance_sd: float = Field(..., ge=0.0)


class OverlapAnalysis(BaseModel):
    """
    Comparison of a declared isotope profile against high-risk references.

    Attributes:
        declared_profile: The profile that was analyzed
        overlap_percent: Largest share of the declared range covered by any reference
        closest_high_risk: Name of the reference with the smallest standardized distance
        closest_overlap_percent: Overlap with that closest reference
        distance_sd: Smallest standardized distance, in declared SDs
        separable: True when the closest reference is further than the threshold
        comparisons: Per-reference figures, in catalog order
        high_risk_profiles: The reference set used
    """

    model_config = ConfigDict(frozen=True)

    declared_profile: IsotopeProfile
    overlap_percent: float = Field(..., ge=0.0, le=100.0)
    closest_high_risk: str
    closest_overlap_percent: float = Field(..., ge=0.0, le=100.0)
    distance_sd: float = Field(..., ge=0.0)
    separable: bool
    comparisons: List[ReferenceComparison] = Field(default_factory=list)
    high_risk_profiles: List[ReferenceProfile] = Field(default_factory=list)


class RiskTier(str, Enum):
    """Risk tier derived from the total score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ScoreBreakdown(BaseModel):
    """Per-factor contributions to the total score."""

    model_config = ConfigDict(frozen=True)

    supply_chain: int
    geographic: int
    isotope: int

    @property
    def total(self) -> int:
        return self.supply_chain + self.geographic + self.isotope


class RiskResult(BaseModel):
    """
    Final risk score for a shipment.

    ``total`` always equals the sum of the breakdown and ``tier`` is a
    fixed function of ``total``.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    tier: RiskTier
    breakdown: ScoreBreakdown
    overlap_analysis: Optional[OverlapAnalysis] = None
    recommendations: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_total(self) -> "RiskResult":
        """Total must equal the breakdown sum."""
        if self.total != self.breakdown.total:
            raise ValueError(
                f"total ({self.total}) does not match breakdown sum ({self.breakdown.total})"
            )
        return self
