"""
Pooling Optimizer
=================

Dorfman two-stage group testing: test pooled samples first and only
retest the members of positive pools.

Algorithm (per plan):
    1. samples_per_group = ceil(sample_size / groups)
    2. pool_size = min(floor(sqrt(1 / p)), samples_per_group), at least 1
    3. pools = ceil(samples_per_group / pool_size) * groups
    4. expected retests = pools * pool_size * p
    5. tests_required = ceil(pools + expected retests)
    6. savings = round((sample_size - tests_required) / sample_size * 100)

Step 4 is an expected-value estimate, not an exact count of retests.

Author: IsoRisk Team
Version: 1.0.0
"""

import logging
import math
from fractions import Fraction

from isorisk.exceptions import InvalidInputError
from shared.schemas.protocol import PoolingPlan


logger = logging.getLogger(__name__)


def optimal_pool_size(samples_per_group: int, defect_rate: float) -> int:
    """
    Dorfman pool size, clamped to [1, samples_per_group].

    A zero defect rate expects no positives, so the whole group is one pool.
    """
    if defect_rate <= 0:
        return max(1, samples_per_group)
    dorfman = math.floor(math.sqrt(1 / defect_rate))
    return max(1, min(dorfman, samples_per_group))


class PoolingOptimizer:
    """
    Dorfman pooling plans with a configured default defect rate.

    Usage:
        optimizer = PoolingOptimizer()
        plan = optimizer.plan(sample_size=100, groups=5)
        plan.tests_required  # 30
    """

    def __init__(self, defect_rate: float = 0.05):
        self.defect_rate = _check_rate(defect_rate)

    def plan(
        self,
        sample_size: int,
        groups: int = 1,
        defect_rate: float = None,
    ) -> PoolingPlan:
        """
        Compute the pooling plan for a sample split across groups.

        Samples from different groups (colours) are never pooled together.

        Args:
            sample_size: Total samples to test (> 0)
            groups: Number of groups the samples are split into (>= 1)
            defect_rate: Expected positive rate; defaults to the instance rate

        Returns:
            PoolingPlan

        Raises:
            InvalidInputError: On non-positive sizes or a rate outside [0, 1]
        """
        rate = self.defect_rate if defect_rate is None else _check_rate(defect_rate)
        if sample_size <= 0:
            raise InvalidInputError(f"sample size must be positive, got {sample_size}")
        if groups < 1:
            raise InvalidInputError(f"groups must be at least 1, got {groups}")

        samples_per_group = math.ceil(Fraction(sample_size, groups))
        pool_size = optimal_pool_size(samples_per_group, rate)
        pools_per_group = math.ceil(Fraction(samples_per_group, pool_size))
        total_pools = pools_per_group * groups

        expected_retests = total_pools * pool_size * Fraction(str(rate))
        tests_required = math.ceil(total_pools + expected_retests)

        savings = Fraction(sample_size - tests_required, sample_size) * 100
        savings_percent = math.floor(savings + Fraction(1, 2))

        logger.debug(
            f"Pooling {sample_size} samples in {groups} groups: pool size {pool_size}, "
            f"{total_pools} pools, {tests_required} expected tests"
        )

        return PoolingPlan(
            pools=total_pools,
            tests_required=tests_required,
            savings_percent=savings_percent,
        )


def _check_rate(defect_rate: float) -> float:
    if not 0.0 <= defect_rate <= 1.0:
        raise InvalidInputError(f"defect rate must be within [0, 1], got {defect_rate}")
    return defect_rate
