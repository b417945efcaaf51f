"""
IsoRisk Sampling Package
========================

Acceptance-sampling protocol engine.

This package provides:
    - aql: ANSI/ASQ Z1.4 lot-size tier table
    - combinatorics: Binomial and hypergeometric kernels
    - pooling: Dorfman two-stage pooling plans
    - power: Hypergeometric detection power
    - protocol: AQL and colour x size protocol generation
    - report: Plain-text protocol export

Author: IsoRisk Team
Version: 1.0.0
"""

from isorisk.sampling.aql import AQLTable, DEFAULT_AQL_TABLE
from isorisk.sampling.combinatorics import combination
from isorisk.sampling.pooling import PoolingOptimizer
from isorisk.sampling.power import DetectionPowerEstimator, detection_power
from isorisk.sampling.protocol import SamplingProtocolGenerator, default_sampling_level
from isorisk.sampling.report import format_protocol_text

__all__ = [
    "AQLTable",
    "DEFAULT_AQL_TABLE",
    "combination",
    "PoolingOptimizer",
    "DetectionPowerEstimator",
    "detection_power",
    "SamplingProtocolGenerator",
    "default_sampling_level",
    "format_protocol_text",
]
