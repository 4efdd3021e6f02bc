"""Closed-form success chance for dice pools.

A pool of ``rolls`` dice scores one hit per die showing ``target`` or more;
the test succeeds when hits reach ``success_threshold``. Hit counts follow
Binomial(rolls, p) with ``p = (sides - target + 1) / sides``.

Binomial coefficients are evaluated in log10 space so that large pools do not
overflow; every summand is assembled in log space and exponentiated last.
"""

from __future__ import annotations

import math
import sys

import numpy as np

from config.settings import (
    DiceSettings,
    InvalidParameter,
    validate_count,
    validate_rolls,
    validate_target,
)

# Float noise at exact percentage boundaries (0.75 -> 74.99999...) must not
# lose a whole point on truncation. The log-space sum drifts by roughly one
# ulp per die, so the allowance grows with the pool and stays far below any
# real fraction of a percent.
_TRUNCATION_EPS_PER_DIE = 1e-12

# Largest log10 value a float can hold
_LOG10_FLOAT_MAX = math.log10(sys.float_info.max)


def _log10_factorial(n: int) -> float:
    """Sum of log10(i) for i in 1..n."""
    if n <= 1:
        return 0.0
    return float(np.log10(np.arange(1, n + 1, dtype=np.float64)).sum())


def _log10_factorial_table(n: int) -> np.ndarray:
    """Cumulative log10 factorials: entry i holds log10(i!) for i in 0..n."""
    steps = np.log10(np.arange(1, n + 1, dtype=np.float64))
    return np.concatenate(([0.0], np.cumsum(steps)))


def _check_pair(n, k) -> tuple[int, int]:
    n = validate_count("n", n)
    k = validate_count("k", k)
    if k > n:
        raise InvalidParameter(f"k must not exceed n, got n={n}, k={k}")
    return n, k


def log10_binomial_coefficient(n: int, k: int) -> float:
    """log10 of C(n, k)."""
    n, k = _check_pair(n, k)
    return _log10_factorial(n) - _log10_factorial(n - k) - _log10_factorial(k)


def binomial_coefficient(n: int, k: int) -> float:
    """Number of ways to choose ``k`` of ``n``, computed through log10 sums.

    Args:
        n: Non-negative integer.
        k: Integer with 0 <= k <= n.

    Returns:
        C(n, k) as a float; exactly 1.0 when k == 0 or k == n, and math.inf
        when the coefficient exceeds the float range (see
        log10_binomial_coefficient for such values).

    Raises:
        InvalidParameter: If either argument is not an integer or k > n.
    """
    n, k = _check_pair(n, k)
    if k == 0 or k == n:
        return 1.0
    log_c = log10_binomial_coefficient(n, k)
    if log_c >= _LOG10_FLOAT_MAX:
        return math.inf
    return math.pow(10.0, log_c)


def hit_probability(target: int, sides_on_die: int) -> float:
    """Chance that a single die meets ``target``."""
    sides_on_die = validate_count("sides_on_die", sides_on_die)
    if sides_on_die < 2:
        raise InvalidParameter(f"sides_on_die must be >= 2, got {sides_on_die}")
    target = validate_target(target, sides_on_die)
    return (sides_on_die - target + 1) / sides_on_die


def hit_distribution(rolls: int, target: int, sides_on_die: int) -> np.ndarray:
    """Probability mass of each hit count 0..rolls.

    A pool with no dice (``rolls <= 0``) has a single outcome, zero hits.
    """
    p = hit_probability(target, sides_on_die)
    rolls = validate_rolls(rolls)
    if rolls <= 0:
        return np.ones(1)

    if p == 1.0:
        # Every die hits; log10(1 - p) is undefined
        pmf = np.zeros(rolls + 1)
        pmf[-1] = 1.0
        return pmf

    k = np.arange(rolls + 1)
    log_fact = _log10_factorial_table(rolls)
    log_pmf = (
        log_fact[rolls]
        - log_fact[rolls - k]
        - log_fact[k]
        + k * math.log10(p)
        + (rolls - k) * math.log10(1.0 - p)
    )
    return np.power(10.0, log_pmf)


def success_probability(
    rolls: int, target: int, success_threshold: int, sides_on_die: int
) -> float:
    """Untruncated P(hits >= success_threshold)."""
    pmf = hit_distribution(rolls, target, sides_on_die)
    success_threshold = validate_count("success_threshold", success_threshold)
    rolls = validate_rolls(rolls)

    if rolls <= 0:
        return 0.0
    if success_threshold == 0:
        return 1.0
    if success_threshold > rolls:
        return 0.0

    # Tail sums accumulated from the top keep the result monotone in the threshold
    tail = np.cumsum(pmf[::-1])[::-1]
    return float(min(1.0, tail[success_threshold]))


def compute_success_chance(
    rolls: int, target: int, success_threshold: int, sides_on_die: int
) -> int:
    """Percentage chance (0-100, truncated) that a pool test succeeds.

    Args:
        rolls: Dice in the pool. Zero or negative means no dice and gives 0.
        target: Inclusive face value counted as a hit, in [1, sides_on_die].
        success_threshold: Minimum hits needed (>= 0).
        sides_on_die: Faces per die (>= 2).

    Returns:
        floor(100 * P(hits >= success_threshold)).

    Raises:
        InvalidParameter: On out-of-range or non-integer arguments.
    """
    probability = success_probability(rolls, target, success_threshold, sides_on_die)
    eps = _TRUNCATION_EPS_PER_DIE * max(rolls, 1)
    return int(math.floor(min(100.0, probability * 100.0 + eps)))


class ProbabilityEngine:
    """Analytic success chances bound to one dice configuration."""

    def __init__(self, settings: DiceSettings | None = None):
        self.settings = settings if settings is not None else DiceSettings()

    def _target(self, target: int | None) -> int:
        return self.settings.standard_target if target is None else target

    def _threshold(self, success_threshold: int | None) -> int:
        if success_threshold is None:
            return self.settings.success_threshold
        return success_threshold

    def compute_success_chance(
        self,
        rolls: int,
        target: int | None = None,
        success_threshold: int | None = None,
    ) -> int:
        """Truncated percentage; target and threshold default to the settings."""
        return compute_success_chance(
            rolls,
            self._target(target),
            self._threshold(success_threshold),
            self.settings.sides_on_die,
        )

    def success_probability(
        self,
        rolls: int,
        target: int | None = None,
        success_threshold: int | None = None,
    ) -> float:
        return success_probability(
            rolls,
            self._target(target),
            self._threshold(success_threshold),
            self.settings.sides_on_die,
        )

    def hit_probability(self, target: int | None = None) -> float:
        return hit_probability(self._target(target), self.settings.sides_on_die)

    def hit_distribution(self, rolls: int, target: int | None = None) -> np.ndarray:
        return hit_distribution(rolls, self._target(target), self.settings.sides_on_die)

    def expected_hits(self, rolls: int, target: int | None = None) -> float:
        """Mean hit count, rolls * p (0 for an empty pool)."""
        rolls = validate_rolls(rolls)
        return max(rolls, 0) * self.hit_probability(target)
