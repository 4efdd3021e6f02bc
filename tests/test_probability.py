import math

import numpy as np
import pytest
from scipy import stats as sp_stats

from config.settings import DiceSettings, InvalidParameter
from probability import (
    ProbabilityEngine,
    binomial_coefficient,
    compute_success_chance,
    hit_distribution,
    hit_probability,
    log10_binomial_coefficient,
    success_probability,
)


# =============================================================================
# Binomial coefficient
# =============================================================================


@pytest.mark.parametrize("n", [0, 1, 2, 7, 30, 500])
def test_binomial_edges_are_exactly_one(n):
    assert binomial_coefficient(n, 0) == 1
    assert binomial_coefficient(n, n) == 1


@pytest.mark.parametrize(
    "n, k, expected",
    [(5, 2, 10), (6, 3, 20), (10, 1, 10), (52, 5, 2598960)],
)
def test_binomial_matches_exact_count(n, k, expected):
    assert binomial_coefficient(n, k) == pytest.approx(expected, rel=1e-9)


def test_log10_binomial_large_values():
    expected = (math.lgamma(1001) - 2 * math.lgamma(501)) / math.log(10)
    assert log10_binomial_coefficient(1000, 500) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize(
    "n, k",
    [(5.0, 2), (5, 2.5), (3, 4), (-1, 0), (4, -1), (True, 1)],
)
def test_binomial_rejects_bad_arguments(n, k):
    with pytest.raises(InvalidParameter):
        binomial_coefficient(n, k)


# =============================================================================
# Success chance
# =============================================================================


def test_single_die_half_chance():
    assert compute_success_chance(1, 4, 1, 6) == 50


def test_two_dice_at_least_one_hit():
    assert compute_success_chance(2, 4, 1, 6) == 75


@pytest.mark.parametrize("rolls", [0, -1, -10])
def test_empty_pool_never_succeeds(rolls):
    assert compute_success_chance(rolls, 4, 0, 6) == 0
    assert compute_success_chance(rolls, 4, 1, 6) == 0


@pytest.mark.parametrize("target", range(1, 7))
def test_zero_threshold_always_met(target):
    for rolls in range(1, 21):
        assert compute_success_chance(rolls, target, 0, 6) == 100


def test_threshold_above_pool_is_impossible():
    assert compute_success_chance(3, 1, 4, 6) == 0
    assert compute_success_chance(10, 4, 11, 6) == 0


@pytest.mark.parametrize("target", range(1, 7))
def test_chance_is_non_increasing_in_threshold(target):
    for rolls in range(1, 16):
        chances = [
            compute_success_chance(rolls, target, t, 6) for t in range(rolls + 2)
        ]
        assert all(a >= b for a, b in zip(chances, chances[1:]))


def test_chance_is_truncated_not_rounded():
    # 1 - (5/6)^2 = 30.56%
    assert compute_success_chance(2, 6, 1, 6) == 30
    # 1 - (2/3)^3 = 70.37%
    assert compute_success_chance(3, 5, 1, 6) == 70
    # 1/6 = 16.67%
    assert compute_success_chance(1, 6, 1, 6) == 16


def test_certain_hit_target():
    assert compute_success_chance(5, 1, 5, 6) == 100
    assert success_probability(5, 1, 3, 6) == 1.0


def test_large_pool_does_not_overflow():
    # P(X >= 1000) for X ~ Bin(2000, 0.5) is about 0.509
    assert compute_success_chance(2000, 4, 1000, 6) == 50
    assert 0.0 <= success_probability(5000, 2, 4000, 6) <= 1.0


@pytest.mark.parametrize(
    "rolls, target, threshold, sides",
    [(4, 4, 2, 6), (10, 5, 3, 6), (12, 8, 4, 10), (60, 3, 40, 6), (300, 6, 50, 6)],
)
def test_success_probability_matches_scipy(rolls, target, threshold, sides):
    p = (sides - target + 1) / sides
    expected = sp_stats.binom.sf(threshold - 1, rolls, p)
    assert success_probability(rolls, target, threshold, sides) == pytest.approx(
        expected, abs=1e-9
    )


@pytest.mark.parametrize("target", [0, 7, -2])
def test_target_outside_die_is_rejected(target):
    with pytest.raises(InvalidParameter):
        compute_success_chance(3, target, 1, 6)
    # Checked even when the pool is empty
    with pytest.raises(InvalidParameter):
        compute_success_chance(0, target, 1, 6)


def test_negative_threshold_is_rejected():
    with pytest.raises(InvalidParameter):
        compute_success_chance(3, 4, -1, 6)


def test_non_integer_rolls_are_rejected():
    with pytest.raises(InvalidParameter):
        compute_success_chance(2.5, 4, 1, 6)


def test_hit_probability():
    assert hit_probability(4, 6) == 0.5
    assert hit_probability(1, 6) == 1.0
    assert hit_probability(10, 10) == pytest.approx(0.1)
    with pytest.raises(InvalidParameter):
        hit_probability(1, 1)


def test_hit_distribution_is_a_pmf():
    pmf = hit_distribution(8, 5, 6)
    assert len(pmf) == 9
    assert pmf.sum() == pytest.approx(1.0)
    assert np.all(pmf >= 0)
    assert hit_distribution(0, 4, 6).tolist() == [1.0]


# =============================================================================
# ProbabilityEngine
# =============================================================================


def test_engine_uses_configured_defaults():
    engine = ProbabilityEngine(DiceSettings())
    assert engine.compute_success_chance(2) == 75
    assert engine.compute_success_chance(1) == 50
    assert engine.expected_hits(4) == 2.0
    assert engine.expected_hits(-3) == 0.0


def test_engines_with_different_dice_coexist():
    d6 = ProbabilityEngine(DiceSettings())
    d10 = ProbabilityEngine(DiceSettings(sides_on_die=10, standard_target=8))
    assert d10.compute_success_chance(1) == 30
    assert d6.compute_success_chance(1) == 50
    assert d10.compute_success_chance(3, target=10, success_threshold=0) == 100


def test_near_certain_chance_is_still_truncated():
    # 1 - (1/6)**15 = 0.99999999999795...
    assert compute_success_chance(15, 2, 1, 6) == 99
    assert compute_success_chance(2, 4, 1, 6) == 75
    assert compute_success_chance(1, 4, 1, 6) == 50


def test_binomial_beyond_float_range_is_infinite():
    assert binomial_coefficient(1100, 550) == math.inf
    assert math.isfinite(log10_binomial_coefficient(1100, 550))
    assert binomial_coefficient(1000, 2) == pytest.approx(499500, rel=1e-9)
