"""
Combinatorics Kernel
====================

Binomial coefficients and the hypergeometric probability mass function.

``hypergeometric_pmf`` works in log space and is what detection-power
estimation uses. ``combination`` is the direct multiplicative C(n, r);
nothing in the engine calls it, but it is the reference the power
calculation is checked against for lots where C(N, n) still fits a double.

Author: IsoRisk Team
Version: 1.0.0
"""

import math


def combination(n: int, r: int) -> float:
    """
    Binomial coefficient C(n, r) by the multiplicative formula.

    Avoids factorials so moderately large n does not overflow; the result
    matches the exact integer to within floating-point rounding.

    Args:
        n: Population size
        r: Number chosen

    Returns:
        C(n, r) as a float (0 when r > n or r < 0)
    """
    if r > n or r < 0:
        return 0.0
    if r == 0 or r == n:
        return 1.0

    result = 1.0
    for i in range(1, r + 1):
        result *= (n - i + 1) / i
    return result


def log_combination(n: int, r: int) -> float:
    """Natural log of C(n, r); ``-inf`` where the coefficient is zero."""
    if r > n or r < 0:
        return -math.inf
    return math.lgamma(n + 1) - math.lgamma(r + 1) - math.lgamma(n - r + 1)


def hypergeometric_pmf(x: int, population: int, successes: int, draws: int) -> float:
    """
    P(X = x) for X ~ Hypergeometric(N=population, K=successes, n=draws).

    Computed in log space: C(N, n) overflows a double long before the
    lot sizes in the AQL table run out.
    """
    log_numerator = (
        log_combination(successes, x)
        + log_combination(population - successes, draws - x)
    )
    if log_numerator == -math.inf:
        return 0.0
    return math.exp(log_numerator - log_combination(population, draws))
