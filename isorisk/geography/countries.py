"""
Country Normalization
=====================

Maps declared country names onto ISO 3166-1 alpha-2 codes.

Different data sources spell countries differently ("Turkey" / "Türkiye",
"USA" / "United States of America"). Matching is an exact lookup against
an explicit alias table after case and whitespace folding. There is no
substring matching: a name that is not in the table is "no data".

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
import re
import unicodedata
from types import MappingProxyType
from typing import Dict, Mapping, Optional


logger = logging.getLogger(__name__)


# ISO code -> accepted spellings (the first is the display name)
_COUNTRY_ALIASES: Dict[str, tuple] = {
    "AU": ("Australia",),
    "BD": ("Bangladesh",),
    "BR": ("Brazil", "Brasil"),
    "CN": ("China", "People's Republic of China", "PRC", "Mainland China"),
    "EG": ("Egypt",),
    "GR": ("Greece",),
    "IN": ("India",),
    "KG": ("Kyrgyzstan", "Kyrgyz Republic"),
    "KZ": ("Kazakhstan",),
    "MX": ("Mexico",),
    "PE": ("Peru",),
    "PK": ("Pakistan",),
    "TJ": ("Tajikistan",),
    "TM": ("Turkmenistan",),
    "TR": ("Turkey", "Türkiye", "Turkiye"),
    "US": ("United States", "United States of America", "USA", "U.S.A.", "U.S."),
    "UZ": ("Uzbekistan",),
    "VN": ("Vietnam", "Viet Nam"),
}


def _fold(name: str) -> str:
    """Case-, accent- and whitespace-insensitive key for a country name."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", stripped).strip().casefold()


def _build_index(aliases: Mapping[str, tuple]) -> Mapping[str, str]:
    index: Dict[str, str] = {}
    for code, names in aliases.items():
        index[_fold(code)] = code
        for name in names:
            index[_fold(name)] = code
    return MappingProxyType(index)


COUNTRY_NAMES: Mapping[str, str] = MappingProxyType(
    {code: names[0] for code, names in _COUNTRY_ALIASES.items()}
)

_ALIAS_INDEX = _build_index(_COUNTRY_ALIASES)


def normalize_country(name: Optional[str]) -> Optional[str]:
    """
    Canonical ISO alpha-2 code for a declared country.

    Args:
        name: Country name or ISO alpha-2 code, as declared

    Returns:
        The ISO code, or None if the name is empty or unknown
    """
    if not name or not name.strip():
        return None
    code = _ALIAS_INDEX.get(_fold(name))
    if code is None:
        logger.debug(f"No canonical country for declared name {name!r}")
    return code


def country_name(code: str) -> Optional[str]:
    """Display name for an ISO code."""
    return COUNTRY_NAMES.get(code.upper())
