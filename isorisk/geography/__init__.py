"""
IsoRisk Geography Package
=========================

Country normalization, the scoring catalog, and isotope profile
construction.

Author: IsoRisk Team
Version: 1.0.0
"""

from isorisk.geography.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_GEOGRAPHIC_RISK,
    DEFAULT_QUESTIONS,
    DEFAULT_REFERENCE_PROFILES,
    RiskCatalog,
)
from isorisk.geography.countries import country_name, normalize_country
from isorisk.geography.profiles import (
    profile_from_direct_entry,
    profile_from_lookup_response,
)

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_GEOGRAPHIC_RISK",
    "DEFAULT_QUESTIONS",
    "DEFAULT_REFERENCE_PROFILES",
    "RiskCatalog",
    "country_name",
    "normalize_country",
    "profile_from_direct_entry",
    "profile_from_lookup_response",
]
