"""
IsoRisk Scoring Package
=======================

Risk scoring engine for shipment origin compliance.

This package provides:
    - overlap: Declared vs. high-risk isotope profile comparison
    - questionnaire: Supply-chain transparency points
    - rules: Isotope point rules and tier thresholds
    - engine: Score calculation orchestration
    - recommendations: Per-tier guidance

Author: IsoRisk Team
Version: 1.0.0
"""

from isorisk.scoring.engine import RiskScoreCalculator
from isorisk.scoring.overlap import IsotopicOverlapAnalyzer
from isorisk.scoring.rules import RiskScoringRules

__all__ = [
    "RiskScoreCalculator",
    "IsotopicOverlapAnalyzer",
    "RiskScoringRules",
]
