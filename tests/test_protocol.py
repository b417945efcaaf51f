"""
Tests for Sampling Protocol Generation
======================================

Tests the AQL and colour x size protocols, plan summaries and the
plain-text export.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from isorisk.exceptions import InvalidInputError
from isorisk.sampling.protocol import (
    CONFIDENCE_BY_TIER,
    SamplingProtocolGenerator,
    default_sampling_level,
)
from isorisk.sampling.report import format_protocol_text
from shared.schemas.assessment import RiskTier
from shared.schemas.protocol import SamplingLevel, TestLocation, Traceability


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def high_risk_pair(generator):
    """5000 units in 3 colours and 4 sizes, high tier, full rigor."""
    return generator.generate(
        lot_size=5000,
        colors=3,
        sizes=4,
        risk_tier=RiskTier.HIGH,
        sampling_level=SamplingLevel.HIGH,
    )


@pytest.fixture
def low_risk_pair(generator):
    """100 units in 2 colours and 5 sizes, low tier, reduced rigor."""
    return generator.generate(
        lot_size=100,
        colors=2,
        sizes=5,
        risk_tier=RiskTier.LOW,
        sampling_level=SamplingLevel.LOW,
    )


# =============================================================================
# Tests
# =============================================================================

class TestAQLProtocol:
    """Test the AQL-based protocol."""

    def test_high_risk_sample_sizes(self, high_risk_pair):
        protocol = high_risk_pair.aql_protocol
        assert protocol.aql == 1.0
        assert protocol.samples_per_color == 200
        assert protocol.total_samples == 600

    def test_high_risk_pooling_and_cost(self, high_risk_pair):
        protocol = high_risk_pair.aql_protocol
        assert protocol.pooling.pools == 150
        assert protocol.pooling.tests_required == 180
        assert protocol.pooling.savings_percent == 70
        assert protocol.cost.unpooled == 180_000
        assert protocol.cost.pooled == 54_000

    def test_high_risk_reporting_fields(self, high_risk_pair):
        protocol = high_risk_pair.aql_protocol
        assert protocol.power == 99
        assert protocol.decision_thresholds.accept == 5
        assert protocol.decision_thresholds.reject == 6
        assert protocol.confidence_level == 4
        assert protocol.risk_tier == RiskTier.HIGH
        assert protocol.sampling_level == SamplingLevel.HIGH

    def test_low_rigor_scales_sample(self, low_risk_pair):
        """100 units sit in the n=20 tier; AQL 4.0 takes 30% of it."""
        protocol = low_risk_pair.aql_protocol
        assert protocol.aql == 4.0
        assert protocol.samples_per_color == 6
        assert protocol.total_samples == 12
        assert protocol.confidence_level == 1

    def test_low_rigor_pooling_and_power(self, low_risk_pair):
        protocol = low_risk_pair.aql_protocol
        assert protocol.pooling.pools == 4
        assert protocol.pooling.tests_required == 5
        assert protocol.pooling.savings_percent == 58
        assert protocol.power == 27

    def test_medium_rigor(self, generator):
        protocol = generator.aql_protocol(
            5000, 1, 1, RiskTier.MEDIUM, SamplingLevel.MEDIUM,
        )
        assert protocol.aql == 2.5
        assert protocol.samples_per_color == 120
        assert protocol.confidence_level == 2

    def test_sampling_level_independent_of_tier(self, generator):
        """A critical shipment can still be sampled at reduced rigor."""
        protocol = generator.aql_protocol(
            5000, 2, 2, RiskTier.CRITICAL, SamplingLevel.LOW,
        )
        assert protocol.aql == 4.0
        assert protocol.samples_per_color == 60
        assert protocol.confidence_level == 4

    def test_cost_per_test_is_configurable(self):
        generator = SamplingProtocolGenerator(cost_per_test=100, defect_rate=0.05)
        protocol = generator.aql_protocol(
            5000, 3, 4, RiskTier.HIGH, SamplingLevel.HIGH,
        )
        assert protocol.cost.unpooled == 60_000
        assert protocol.cost.pooled == 18_000

    def test_negative_cost_rejected(self):
        with pytest.raises(InvalidInputError):
            SamplingProtocolGenerator(cost_per_test=-1)

    @pytest.mark.parametrize("lot_size,colors,sizes", [
        (0, 1, 1), (-10, 1, 1), (100, 0, 1), (100, 1, 0),
    ])
    def test_invalid_lot_parameters(self, generator, lot_size, colors, sizes):
        with pytest.raises(InvalidInputError):
            generator.generate(
                lot_size=lot_size,
                colors=colors,
                sizes=sizes,
                risk_tier=RiskTier.LOW,
                sampling_level=SamplingLevel.LOW,
            )

    def test_protocol_is_frozen(self, high_risk_pair):
        with pytest.raises(ValidationError):
            high_risk_pair.aql_protocol.total_samples = 1

    def test_deterministic(self, generator, high_risk_pair):
        again = generator.generate(
            lot_size=5000,
            colors=3,
            sizes=4,
            risk_tier=RiskTier.HIGH,
            sampling_level=SamplingLevel.HIGH,
        )
        assert again == high_risk_pair


class TestColorSizeProtocol:
    """Test the colour x size protocol."""

    def test_low_tier_one_sample_per_color(self, low_risk_pair):
        protocol = low_risk_pair.color_size_protocol
        assert protocol.samples == 2
        assert protocol.sizes_used == 2
        assert protocol.description == (
            "Test every color (2) using 2 different sizes = 2 samples"
        )

    def test_low_tier_with_single_size(self, generator):
        protocol = generator.color_size_protocol(3, 1, RiskTier.LOW)
        assert protocol.samples == 3
        assert protocol.sizes_used == 1

    def test_low_tier_pooling_costs_more(self, low_risk_pair):
        """One sample per colour: every pool is a single sample plus retests."""
        protocol = low_risk_pair.color_size_protocol
        assert protocol.pooling.pools == 2
        assert protocol.pooling.tests_required == 3
        assert protocol.pooling.savings_percent == -50

    def test_medium_tier_all_combinations(self, generator):
        protocol = generator.color_size_protocol(3, 4, RiskTier.MEDIUM)
        assert protocol.samples == 12
        assert protocol.sizes_used == 4
        assert protocol.description == "Test every color (3) x all sizes (4) = 12 samples"

    def test_high_tier(self, high_risk_pair):
        protocol = high_risk_pair.color_size_protocol
        assert protocol.samples == 12
        assert protocol.description == "Test all colors (3) x all sizes (4) = 12 samples"
        assert protocol.pooling.pools == 3
        assert protocol.pooling.tests_required == 4
        assert protocol.pooling.savings_percent == 67
        assert protocol.cost.unpooled == 3600
        assert protocol.cost.pooled == 1200


class TestSamplingDefaults:
    """Test tier-driven defaults."""

    @pytest.mark.parametrize("tier,level", [
        (RiskTier.LOW, SamplingLevel.LOW),
        (RiskTier.MEDIUM, SamplingLevel.MEDIUM),
        (RiskTier.HIGH, SamplingLevel.HIGH),
        (RiskTier.CRITICAL, SamplingLevel.HIGH),
    ])
    def test_default_sampling_level(self, tier, level):
        assert default_sampling_level(tier) == level

    def test_confidence_covers_every_tier(self):
        assert set(CONFIDENCE_BY_TIER) == set(RiskTier)

    def test_string_inputs_accepted(self, generator):
        pair = generator.generate(
            lot_size=500, colors=1, sizes=1, risk_tier="medium", sampling_level="medium",
        )
        assert pair.aql_protocol.risk_tier == RiskTier.MEDIUM
        assert pair.aql_protocol.samples_per_color == 30


class TestTestLocation:
    """Test garment vs. fabric sampling metadata."""

    def test_defaults_to_garment_batch(self, high_risk_pair):
        assert high_risk_pair.aql_protocol.test_location == TestLocation.GARMENT
        assert high_risk_pair.aql_protocol.traceability == Traceability.BATCH

    def test_fabric_without_sku_traceability_warns(self, generator):
        with capture_logs() as logs:
            pair = generator.generate(
                lot_size=1000,
                colors=2,
                sizes=3,
                risk_tier=RiskTier.MEDIUM,
                sampling_level=SamplingLevel.MEDIUM,
                test_location=TestLocation.FABRIC,
                traceability=Traceability.BATCH,
            )
        assert pair.aql_protocol.test_location == TestLocation.FABRIC
        events = [entry["event"] for entry in logs]
        assert "fabric_testing_without_sku_traceability" in events

    def test_fabric_with_sku_traceability_is_quiet(self, generator):
        with capture_logs() as logs:
            generator.generate(
                lot_size=1000,
                colors=2,
                sizes=3,
                risk_tier=RiskTier.MEDIUM,
                sampling_level=SamplingLevel.MEDIUM,
                test_location=TestLocation.FABRIC,
                traceability=Traceability.SKU,
            )
        events = [entry["event"] for entry in logs]
        assert "fabric_testing_without_sku_traceability" not in events


class TestPlanSummary:
    """Test the flattened mitigation-plan record."""

    def test_summary_fields(self, high_risk_pair):
        stamp = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        summary = high_risk_pair.to_plan_summary(generated_at=stamp)
        assert summary["generated"] is True
        assert summary["timestamp"] == "2024-03-01T12:00:00+00:00"
        assert summary["lot_size"] == 5000
        assert summary["sampling_level"] == "high"
        assert summary["total_samples"] == 600
        assert summary["samples_per_color"] == 200
        assert summary["estimated_cost"] == 54_000
        assert summary["confidence_level"] == 4
        assert summary["test_location"] == "garment"
        assert summary["color_size_samples"] == 12
        assert summary["color_size_pooled_cost"] == 1200

    def test_summary_defaults_timestamp(self, high_risk_pair):
        summary = high_risk_pair.to_plan_summary()
        assert datetime.fromisoformat(summary["timestamp"]).tzinfo is not None


class TestProtocolText:
    """Test the plain-text export."""

    def test_contains_both_protocols(self, high_risk_pair):
        text = format_protocol_text(high_risk_pair)
        assert "ISOTOPIC TESTING PROTOCOL 1 (AQL-Based)" in text
        assert "PROTOCOL 2 (Color x Size Based)" in text

    def test_aql_lines(self, high_risk_pair):
        text = format_protocol_text(high_risk_pair)
        assert "Lot: 5000 units | AQL 1.0 | 4% Confidence" in text
        assert "Samples: 600 (200/color x 3 colors)" in text
        assert "Cost: $54,000 (70% savings)" in text
        assert "Decision: <=5 accept / >=6 reject" in text

    def test_color_size_lines(self, high_risk_pair):
        text = format_protocol_text(high_risk_pair)
        assert "Test all colors (3) x all sizes (4) = 12 samples" in text
        assert "Total Samples: 12" in text
        assert "Cost: $1,200 (67% savings)" in text
