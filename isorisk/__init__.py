"""
IsoRisk Core Package
====================

Risk scoring and isotope testing-protocol engine for declared-origin
compliance of cotton goods.

This package contains:
    - scoring/: Supply-chain, geographic and isotopic-overlap risk score
    - sampling/: AQL lookup, Dorfman pooling, detection power, protocols
    - geography/: Country normalization, scoring catalog, isotope profiles
    - integrations/: Geography/isotope lookup service client
    - assessment: Lookup -> score -> protocol orchestration

Author: IsoRisk Team
Version: 1.0.0
"""

__version__ = "1.0.0"
