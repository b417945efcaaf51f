"""
IsoRisk Shared Schemas Package
==============================

Value objects exchanged between the engine and its callers.

This package provides:
    - Risk scoring types: IsotopeProfile, OverlapAnalysis, RiskResult, ...
    - Sampling types: AQLRow, PoolingPlan, TestingProtocol, ProtocolPair, ...
    - Enumerations: Answer, RiskTier, SamplingLevel, TestLocation, Traceability

Author: IsoRisk Team
Version: 1.0.0
"""

from shared.schemas.assessment import (
    IsotopeProfile,
    ReferenceProfile,
    Answer,
    SupplyChainQuestion,
    ReferenceComparison,
    OverlapAnalysis,
    RiskTier,
    ScoreBreakdown,
    RiskResult,
)

from shared.schemas.protocol import (
    SamplingLevel,
    TestLocation,
    Traceability,
    AQLRow,
    PoolingPlan,
    CostEstimate,
    DecisionThresholds,
    TestingProtocol,
    ColorSizeProtocol,
    ProtocolPair,
)

__all__ = [
    # Risk scoring
    "IsotopeProfile",
    "ReferenceProfile",
    "Answer",
    "SupplyChainQuestion",
    "ReferenceComparison",
    "OverlapAnalysis",
    "RiskTier",
    "ScoreBreakdown",
    "RiskResult",
    # Sampling
    "SamplingLevel",
    "TestLocation",
    "Traceability",
    "AQLRow",
    "PoolingPlan",
    "CostEstimate",
    "DecisionThresholds",
    "TestingProtocol",
    "ColorSizeProtocol",
    "ProtocolPair",
]
