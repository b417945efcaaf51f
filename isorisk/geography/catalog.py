"""
Risk Catalog
============

Static configuration data for risk scoring:

    - The supply-chain questionnaire and its point tables
    - Geographic risk scores per country (ISO alpha-2)
    - High-risk reference isotope profiles

A RiskCatalog is immutable and is passed into the calculator, so an
updated catalog (new risk scores, new reference regions) needs no code
change and tests can use their own.

Author: IsoRisk Team
Version: 1.0.0
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from isorisk.exceptions import InvalidInputError
from isorisk.geography.countries import normalize_country
from shared.schemas.assessment import (
    Answer,
    IsotopeProfile,
    ReferenceProfile,
    SupplyChainQuestion,
)


def _question(question_id: str, text: str, yes: int, no: int, unknown: int) -> SupplyChainQuestion:
    return SupplyChainQuestion(
        question_id=question_id,
        text=text,
        points={Answer.YES: yes, Answer.NO: no, Answer.UNKNOWN: unknown},
    )


DEFAULT_QUESTIONS: Tuple[SupplyChainQuestion, ...] = (
    _question(
        "supplier_identified",
        "Is the raw-material (cotton) supplier identified by name?",
        yes=0, no=15, unknown=10,
    ),
    _question(
        "chain_of_custody",
        "Are chain-of-custody documents available back to the gin?",
        yes=0, no=25, unknown=15,
    ),
    _question(
        "third_party_audit",
        "Has an independent third-party audit been done in the last 12 months?",
        yes=0, no=10, unknown=5,
    ),
    _question(
        "no_xinjiang_sourcing_declaration",
        "Has the supplier signed a declaration of no high-risk-region sourcing?",
        yes=0, no=5, unknown=3,
    ),
)

# ISO alpha-2 -> geographic risk points
DEFAULT_GEOGRAPHIC_RISK: Mapping[str, int] = MappingProxyType({
    "CN": 100,
    "KG": 50,
    "KZ": 50,
    "TJ": 40,
    "TM": 40,
    "UZ": 40,
    "PK": 30,
    "BD": 20,
    "IN": 20,
    "VN": 20,
    "TR": 15,
    "EG": 10,
    "BR": 5,
    "AU": 0,
    "US": 0,
})

DEFAULT_REFERENCE_PROFILES: Tuple[ReferenceProfile, ...] = (
    ReferenceProfile(
        name="Xinjiang - Aksu",
        profile=IsotopeProfile(mean=29.5, min=27.0, max=32.0, sd=1.25),
    ),
    ReferenceProfile(
        name="Xinjiang - Kashgar",
        profile=IsotopeProfile(mean=30.5, min=28.0, max=33.0, sd=1.25),
    ),
    ReferenceProfile(
        name="Xinjiang - Korla",
        profile=IsotopeProfile(mean=29.0, min=26.5, max=31.5, sd=1.25),
    ),
    ReferenceProfile(
        name="Xinjiang - Turpan",
        profile=IsotopeProfile(mean=31.5, min=29.0, max=34.5, sd=1.4),
    ),
)


@dataclass(frozen=True)
class RiskCatalog:
    """
    Immutable scoring configuration.

    Attributes:
        questions: Fixed questionnaire, in presentation order
        geographic_risk: ISO alpha-2 code -> risk points
        reference_profiles: High-risk reference regions, in comparison order
    """

    questions: Tuple[SupplyChainQuestion, ...] = DEFAULT_QUESTIONS
    geographic_risk: Mapping[str, int] = field(default_factory=lambda: DEFAULT_GEOGRAPHIC_RISK)
    reference_profiles: Tuple[ReferenceProfile, ...] = DEFAULT_REFERENCE_PROFILES

    def __post_init__(self):
        ids = [q.question_id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise InvalidInputError("question ids must be unique")
        # Freeze whatever the caller handed in
        object.__setattr__(self, "questions", tuple(self.questions))
        object.__setattr__(self, "reference_profiles", tuple(self.reference_profiles))
        object.__setattr__(
            self,
            "geographic_risk",
            MappingProxyType({code.upper(): int(points) for code, points in self.geographic_risk.items()}),
        )

    @property
    def question_ids(self) -> Tuple[str, ...]:
        return tuple(q.question_id for q in self.questions)

    def geographic_score(self, declared_country: Optional[str]) -> int:
        """Risk points for a declared country; unknown or empty is 0."""
        code = normalize_country(declared_country)
        if code is None:
            return 0
        return self.geographic_risk.get(code, 0)

    @classmethod
    def from_country_names(
        cls,
        geographic_risk: Mapping[str, int],
        questions: Optional[Iterable[SupplyChainQuestion]] = None,
        reference_profiles: Optional[Iterable[ReferenceProfile]] = None,
    ) -> "RiskCatalog":
        """
        Build a catalog whose risk table is keyed by country name.

        Raises:
            InvalidInputError: If a name cannot be normalized to an ISO code
        """
        by_code: Dict[str, int] = {}
        for name, points in geographic_risk.items():
            code = normalize_country(name)
            if code is None:
                raise InvalidInputError(f"unknown country in risk table: {name!r}")
            by_code[code] = points
        return cls(
            questions=tuple(questions) if questions is not None else DEFAULT_QUESTIONS,
            geographic_risk=by_code,
            reference_profiles=(
                tuple(reference_profiles)
                if reference_profiles is not None
                else DEFAULT_REFERENCE_PROFILES
            ),
        )


DEFAULT_CATALOG = RiskCatalog()
