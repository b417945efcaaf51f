"""
Tests for Acceptance Sampling
=============================

AQL lookup, combinatorics, detection power and Dorfman pooling.
"""

import math

import pytest
from pydantic import ValidationError

from isorisk.exceptions import InvalidInputError
from isorisk.sampling.aql import (
    DEFAULT_AQL_TABLE,
    MIN_SAMPLE_SIZE,
    AQLTable,
    aql_multiplier,
    scale_sample_size,
)
from isorisk.sampling.combinatorics import (
    combination,
    hypergeometric_pmf,
    log_combination,
)
from isorisk.sampling.pooling import PoolingOptimizer, optimal_pool_size
from isorisk.sampling.power import (
    MAX_REPORTED_POWER,
    DetectionPowerEstimator,
    detection_power,
    round_half_up,
)
from shared.schemas.protocol import AQLRow


LOT_SIZES = [1, 2, 8, 9, 50, 91, 150, 151, 500, 1200, 3200, 5000, 10000, 35000, 35001, 1_000_000]


# =============================================================================
# AQL Table
# =============================================================================

class TestAQLLookup:
    """Test lot-size tier lookup."""

    def test_lot_5000_at_aql_1(self):
        """5000 units sits in the 3201-10000 tier."""
        row = DEFAULT_AQL_TABLE.lookup(5000, 1.0)
        assert row.sample_size == 200
        assert row.accept_number == 5
        assert row.reject_number == 6

    @pytest.mark.parametrize("lot_size,sample_size", [
        (2, 2), (8, 2), (9, 3), (15, 3), (16, 5), (150, 20),
        (151, 32), (3200, 125), (3201, 200), (35000, 315), (35001, 500),
    ])
    def test_tier_boundaries(self, lot_size, sample_size):
        """Boundary lots fall into the tier that includes them."""
        assert DEFAULT_AQL_TABLE.lookup(lot_size).sample_size == sample_size

    def test_lot_below_table_clamps_to_first_tier(self):
        row = DEFAULT_AQL_TABLE.lookup(1)
        assert row.sample_size == 2
        assert row.lot_range_min == 2

    def test_lot_above_table_uses_last_tier(self):
        row = DEFAULT_AQL_TABLE.lookup(1_000_000)
        assert row.sample_size == 500
        assert row.accept_number == 10
        assert row.reject_number == 11

    @pytest.mark.parametrize("lot_size", [0, -5])
    def test_non_positive_lot_rejected(self, lot_size):
        with pytest.raises(InvalidInputError):
            DEFAULT_AQL_TABLE.lookup(lot_size)

    def test_unsupported_aql_rejected(self):
        with pytest.raises(InvalidInputError):
            DEFAULT_AQL_TABLE.lookup(5000, 0.65)

    @pytest.mark.parametrize("aql", [1.0, 2.5, 4.0])
    def test_sample_size_monotonic_in_lot_size(self, aql):
        """A bigger lot never gets a smaller sample."""
        sizes = [DEFAULT_AQL_TABLE.lookup(lot, aql).sample_size for lot in LOT_SIZES]
        assert sizes == sorted(sizes)

    @pytest.mark.parametrize("aql", [1.0, 2.5, 4.0])
    def test_reject_is_accept_plus_one(self, aql):
        for lot in LOT_SIZES:
            row = DEFAULT_AQL_TABLE.lookup(lot, aql)
            assert row.reject_number == row.accept_number + 1
            assert row.sample_size >= MIN_SAMPLE_SIZE

    def test_rows_are_frozen(self):
        row = DEFAULT_AQL_TABLE.lookup(5000)
        with pytest.raises(ValidationError):
            row.sample_size = 1

    def test_custom_table(self):
        """A table built from other rows is sorted by lot range."""
        table = AQLTable([
            AQLRow(lot_range_min=101, lot_range_max=None, sample_size=40,
                   accept_number=1, reject_number=2),
            AQLRow(lot_range_min=1, lot_range_max=100, sample_size=10,
                   accept_number=0, reject_number=1),
        ])
        assert table.lookup(50).sample_size == 10
        assert table.lookup(500).sample_size == 40

    def test_empty_table_rejected(self):
        with pytest.raises(InvalidInputError):
            AQLTable([])


class TestAQLScaling:
    """Test AQL 2.5 / 4.0 sample-size scaling."""

    def test_multipliers(self):
        assert aql_multiplier(1.0) == "1.0"
        assert aql_multiplier(2.5) == "0.6"
        assert aql_multiplier(4) == "0.3"

    def test_lot_5000_scaled(self):
        assert DEFAULT_AQL_TABLE.lookup(5000, 2.5).sample_size == 120
        assert DEFAULT_AQL_TABLE.lookup(5000, 4.0).sample_size == 60

    def test_exact_products_do_not_round_up(self):
        """20 x 0.3 is 6, not 7."""
        assert scale_sample_size(20, "0.3") == 6
        assert DEFAULT_AQL_TABLE.lookup(100, 4.0).sample_size == 6
        assert DEFAULT_AQL_TABLE.lookup(100, 2.5).sample_size == 12

    def test_minimum_of_two(self):
        assert scale_sample_size(2, "0.3") == 2
        assert scale_sample_size(3, "0.6") == 2
        assert DEFAULT_AQL_TABLE.lookup(5, 4.0).sample_size == 2

    def test_rounds_up(self):
        assert scale_sample_size(125, "0.3") == 38
        assert scale_sample_size(315, "0.6") == 189

    def test_scaled_tiers(self):
        base = [row.sample_size for row in DEFAULT_AQL_TABLE.rows]
        assert [scale_sample_size(n, "0.6") for n in base] == [
            2, 2, 3, 5, 8, 12, 20, 30, 48, 75, 120, 189, 300,
        ]
        assert [scale_sample_size(n, "0.3") for n in base] == [
            2, 2, 2, 3, 4, 6, 10, 15, 24, 38, 60, 95, 150,
        ]

    @pytest.mark.parametrize("lot_size", LOT_SIZES)
    def test_looser_aql_never_samples_more(self, lot_size):
        """sample(4.0) <= sample(2.5) <= sample(1.0) for the same lot."""
        loose = DEFAULT_AQL_TABLE.lookup(lot_size, 4.0).sample_size
        normal = DEFAULT_AQL_TABLE.lookup(lot_size, 2.5).sample_size
        tight = DEFAULT_AQL_TABLE.lookup(lot_size, 1.0).sample_size
        assert loose <= normal <= tight

    def test_scaling_keeps_decision_numbers(self):
        row = DEFAULT_AQL_TABLE.lookup(5000, 4.0)
        assert (row.accept_number, row.reject_number) == (5, 6)


# =============================================================================
# Combinatorics
# =============================================================================

class TestCombination:
    """Test binomial coefficients."""

    def test_small_values(self):
        assert combination(5, 2) == 10
        assert combination(10, 3) == pytest.approx(120)

    def test_edges(self):
        assert combination(10, 0) == 1
        assert combination(10, 10) == 1
        assert combination(3, 5) == 0
        assert combination(3, -1) == 0

    def test_large_value_matches_exact(self):
        assert combination(52, 5) == pytest.approx(2_598_960)

    def test_log_combination(self):
        assert log_combination(20, 10) == pytest.approx(math.log(184_756))
        assert log_combination(3, 5) == float("-inf")

    def test_pmf_sums_to_one(self):
        total = sum(hypergeometric_pmf(x, 100, 5, 10) for x in range(0, 6))
        assert total == pytest.approx(1.0)

    def test_pmf_impossible_outcome(self):
        assert hypergeometric_pmf(6, 100, 5, 10) == 0.0


# =============================================================================
# Detection Power
# =============================================================================

class TestDetectionPower:
    """Test hypergeometric detection power."""

    def test_matches_direct_summation(self):
        """n=20 from N=5000 with 250 defectives."""
        n, lot, k = 20, 5000, 250
        total = combination(lot, n)
        p = sum(
            combination(k, x) * combination(lot - k, n - x) / total
            for x in range(1, n + 1)
        )
        expected = min(round_half_up(p * 100), MAX_REPORTED_POWER)
        assert detection_power(n, lot, 0.05) == expected
        assert 60 <= expected <= 70

    def test_small_lot(self):
        """6 from 100 with 5 defectives detects about 27% of the time."""
        assert detection_power(6, 100, 0.05) == 27

    def test_no_defectives_means_no_power(self):
        """floor(10 * 0.05) is 0."""
        assert detection_power(2, 10, 0.05) == 0

    def test_capped_at_99(self):
        assert detection_power(200, 5000) == 99
        assert detection_power(500, 600) == 99

    def test_large_lot_does_not_overflow(self):
        assert detection_power(500, 1_000_000) == 99

    def test_sample_larger_than_lot(self):
        """Drawing the whole lot always finds the defective unit."""
        assert detection_power(50, 20, 0.05) == 99

    @pytest.mark.parametrize("n,lot", [(2, 10), (20, 5000), (80, 1000), (500, 40000)])
    def test_within_bounds(self, n, lot):
        assert 0 <= detection_power(n, lot) <= MAX_REPORTED_POWER

    def test_monotonic_in_sample_size(self):
        powers = [detection_power(n, 5000) for n in (2, 5, 13, 20, 50, 80)]
        assert powers == sorted(powers)

    @pytest.mark.parametrize("n,lot,rate", [(0, 100, 0.05), (5, 0, 0.05), (5, 100, 1.5)])
    def test_invalid_inputs(self, n, lot, rate):
        with pytest.raises(InvalidInputError):
            detection_power(n, lot, rate)

    def test_estimator_uses_configured_rate(self):
        estimator = DetectionPowerEstimator(defect_rate=0.1)
        assert estimator.power(20, 5000) == detection_power(20, 5000, 0.1)
        assert estimator.power(20, 5000, defect_rate=0.05) == detection_power(20, 5000)

    def test_round_half_up(self):
        assert round_half_up(26.5) == 27
        assert round_half_up(26.49) == 26
        assert round_half_up(-32.5) == -32


# =============================================================================
# Pooling
# =============================================================================

class TestPoolingOptimizer:
    """Test Dorfman pooling plans."""

    @pytest.fixture
    def optimizer(self):
        return PoolingOptimizer(defect_rate=0.05)

    def test_hundred_samples_five_groups(self, optimizer):
        """20 per colour in pools of 4: 25 pools, 5 expected retests."""
        plan = optimizer.plan(100, 5)
        assert plan.pools == 25
        assert plan.tests_required == 30
        assert plan.savings_percent == 70

    def test_pool_size_capped_by_group(self):
        assert optimal_pool_size(2, 0.05) == 2
        assert optimal_pool_size(200, 0.05) == 4
        assert optimal_pool_size(200, 1.0) == 1

    def test_zero_rate_pools_whole_group(self, optimizer):
        assert optimal_pool_size(20, 0.0) == 20
        plan = optimizer.plan(100, 5, defect_rate=0.0)
        assert plan.pools == 5
        assert plan.tests_required == 5
        assert plan.savings_percent == 95

    def test_single_small_group(self, optimizer):
        plan = optimizer.plan(2, 1)
        assert plan.pools == 1
        assert plan.tests_required == 2
        assert plan.savings_percent == 0

    def test_negative_savings(self, optimizer):
        """One sample per colour gains nothing and retests cost extra."""
        plan = optimizer.plan(3, 3)
        assert plan.pools == 3
        assert plan.tests_required == 4
        assert plan.savings_percent == -33

    def test_all_defective(self, optimizer):
        plan = optimizer.plan(10, 1, defect_rate=1.0)
        assert plan.pools == 10
        assert plan.tests_required == 20
        assert plan.savings_percent == -100

    @pytest.mark.parametrize("samples,groups", [
        (2, 1), (12, 3), (100, 5), (600, 3), (7, 4), (500, 1),
    ])
    def test_plan_invariants(self, optimizer, samples, groups):
        plan = optimizer.plan(samples, groups)
        assert plan.tests_required >= plan.pools >= groups
        assert plan.savings_percent <= 100

    @pytest.mark.parametrize("samples,groups,rate", [
        (0, 1, 0.05), (10, 0, 0.05), (10, 1, -0.1), (10, 1, 1.1),
    ])
    def test_invalid_inputs(self, optimizer, samples, groups, rate):
        with pytest.raises(InvalidInputError):
            optimizer.plan(samples, groups, defect_rate=rate)

    def test_invalid_default_rate(self):
        with pytest.raises(InvalidInputError):
            PoolingOptimizer(defect_rate=2.0)
