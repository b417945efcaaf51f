"""
pytest configuration and fixtures.

Author: IsoRisk Team
Version: 1.0.0
"""

import pytest

from isorisk.geography.catalog import DEFAULT_CATALOG
from isorisk.sampling.protocol import SamplingProtocolGenerator
from isorisk.scoring.engine import RiskScoreCalculator
from isorisk.scoring.overlap import IsotopicOverlapAnalyzer
from shared.schemas.assessment import IsotopeProfile, ReferenceProfile


@pytest.fixture
def catalog():
    """Default scoring catalog."""
    return DEFAULT_CATALOG


@pytest.fixture
def calculator():
    """Risk score calculator on the default catalog."""
    return RiskScoreCalculator()


@pytest.fixture
def analyzer():
    """Overlap analyzer with the default 2 SD separability threshold."""
    return IsotopicOverlapAnalyzer(separability_threshold=2.0)


@pytest.fixture
def generator():
    """Protocol generator at $300 per test and a 5% defect rate."""
    return SamplingProtocolGenerator(cost_per_test=300, defect_rate=0.05)


@pytest.fixture
def declared_profile():
    """Declared origin with a 20-30 permil range."""
    return IsotopeProfile(mean=25.0, min=20.0, max=30.0, sd=2.5)


@pytest.fixture
def identical_reference():
    """Reference with exactly the declared range and mean."""
    return ReferenceProfile(
        name="Reference A",
        profile=IsotopeProfile(mean=25.0, min=20.0, max=30.0),
    )


@pytest.fixture
def all_no_answers(catalog):
    """Every questionnaire item answered "no"."""
    return {question_id: "no" for question_id in catalog.question_ids}


@pytest.fixture
def all_yes_answers(catalog):
    """Every questionnaire item answered "yes"."""
    return {question_id: "yes" for question_id in catalog.question_ids}
