"""Tests for summation, factorials, Gamma, Beta and the incomplete functions."""

from __future__ import annotations

import math

import pytest

from numstat import GammaMethod, Statistics
from numstat.special import (
	FactorialCache, fraction_depth, gamma_depth, kahan_sum, log_beta, plain_sum, regularised_fraction,
)

EPS = 1e-5


# --- Summation ---------------------------------------------------------------
def test_sums_are_order_independent(stats):
	assert stats.sum([3, 6, 12, 24]) == 45
	assert stats.sum([12, 6, 24, 3]) == 45
	assert stats.sum_exact([3, 6, 12, 24]) == 45
	assert stats.sum_exact([12, 6, 24, 3]) == 45


def test_sum_exact_compensates_rounding(stats):
	assert math.isclose(stats.sum_exact([1.2, 1.00003, 2.04, -0.3, 12, 0.9]), 16.84003, rel_tol=0, abs_tol=1e-12)


def test_sums_skip_non_numeric_entries(stats):
	data = [1, 2, 3, "string", False, math.nan, math.inf, 4, 5]
	assert stats.sum(data) == 15
	assert stats.sum_exact(data) == 15
	assert kahan_sum(data) == 15
	assert plain_sum(data) == 15


def test_empty_and_missing_sums(stats):
	assert stats.sum([]) is None
	assert stats.sum_exact([]) is None
	assert len(stats.diagnostics) == 0

	assert stats.sum(None) is None
	assert stats.sum_exact(None) is None
	assert stats.diagnostics.last.kind.value == "missing"


def test_product(stats):
	assert stats.product([3, 6, 12, 24]) == 5184
	assert stats.product([12, 6, 24, 3]) == 5184
	assert stats.product([2]) == 2
	assert stats.product([2, -3, 4, 7]) == -168
	assert stats.product([2, -3, -4, 7]) == 168
	assert stats.product([1, 3, 7, 4, 12, True, 4, "a", 3, 6, 7, 1, 2, math.nan]) == 1016064
	assert stats.product([]) == 1
	assert stats.product(None) is None


# --- Factorial and Gamma -----------------------------------------------------
@pytest.mark.parametrize("n", [0, 1, 2, 5, 10, 15, 20, 21])
def test_factorial_matches_math_factorial(stats, n):
	assert stats.factorial(n) == math.factorial(n)
	assert stats.compute_factorial(n) == math.factorial(n)


def test_factorial_beyond_seed_table_extends_cache(stats):
	assert stats.factorials.largest == 21
	assert stats.factorial(25) == math.factorial(25)
	assert stats.factorials.largest == 25
	assert 23 in stats.factorials


def test_factorial_cache_is_owned_by_the_engine():
	first, second = Statistics(), Statistics()
	first.compute_factorial(30)
	assert first.factorials.largest == 30
	assert second.factorials.largest == 21


def test_factorial_cache_standalone():
	cache = FactorialCache()
	assert cache.get(22) is None
	assert cache.get_or_compute(22) == math.factorial(22)
	assert cache.get(22) == math.factorial(22)
	assert list(cache)[:4] == [1, 1, 2, 6]
	with pytest.raises(ValueError):
		cache.get_or_compute(-1)


def test_gamma_of_integers(stats):
	assert stats.gamma(10) == 362880
	assert stats.gamma_spouge(10) == 362880
	assert stats.gamma_stirling(10) == 362880
	assert abs(stats.gamma(25) - 620448401733239439360000) < 1e9
	assert abs(stats.gamma_stirling(25) - 620448401733239439360000) < 1e9
	assert stats.gamma(1) == 1
	assert stats.gamma(0) == math.inf
	assert stats.gamma_spouge(0) == math.inf
	assert stats.gamma_stirling(0) == math.inf


def test_gamma_of_non_integers(stats):
	assert abs(stats.gamma(3.4) - 2.98121) <= EPS
	assert abs(stats.gamma_spouge(3.4) - 2.98121) <= EPS
	assert abs(stats.gamma_stirling(3.4) - 2.98121) <= EPS
	assert abs(stats.factorial(3.4) - 2.98121) <= EPS
	assert abs(stats.compute_factorial(3.4) - 2.98121) <= EPS
	assert stats.gamma_spouge(3.4) != stats.gamma_stirling(3.4)


def test_gamma_method_selection():
	stats = Statistics()
	assert stats.gamma(3.4, GammaMethod.SPOUGE) == stats.gamma_spouge(3.4)
	assert stats.gamma(3.4, "spouge") == stats.gamma_spouge(3.4)
	assert stats.gamma(3.4) == stats.gamma_stirling(3.4)

	spouge = Statistics(gamma_method="spouge")
	assert spouge.options.gamma_method is GammaMethod.SPOUGE
	assert spouge.gamma(3.4) == spouge.gamma_spouge(3.4)


def test_gamma_of_large_arguments_overflows_to_inf(stats):
	assert stats.gamma(500.5) == math.inf
	assert stats.gamma_spouge(500.5) == math.inf


@pytest.mark.parametrize("bad", [None, "a", True, {}])
def test_factorial_and_gamma_refuse_non_numeric(stats, bad):
	assert stats.factorial(bad) is None
	assert stats.compute_factorial(bad) is None
	assert stats.gamma(bad) is None
	assert stats.gamma_spouge(bad) is None
	assert stats.gamma_stirling(bad) is None


def test_factorial_and_gamma_refuse_negative_arguments(stats):
	assert stats.factorial(-2) is None
	assert stats.compute_factorial(-2) is None
	assert stats.gamma(-2) is None
	assert stats.diagnostics.last.kind.value == "domain"


# --- Binomial coefficient ----------------------------------------------------
@pytest.mark.parametrize(
	("n", "k", "expected"),
	[(6, 2, 15), (12, 7, 792), (12, 1, 12), (6, 6, 1), (12, 0, 1), (0, 0, 1)],
)
def test_binomial_coefficient(stats, n, k, expected):
	assert math.isclose(stats.binomial_coefficient(n, k), expected)


@pytest.mark.parametrize(
	("n", "k"),
	[(2, 6), (-1, 6), (6, -1), (2.3, 6), (6, 2.3), (2, "a"), ("a", 2), (2, True), (True, 2)],
)
def test_binomial_coefficient_refuses_invalid_arguments(stats, n, k):
	assert stats.binomial_coefficient(n, k) is None


# --- Incomplete Gamma --------------------------------------------------------
@pytest.mark.parametrize(
	("s", "x", "expected"),
	[(4.14, 3, 2.3324502722), (7, 2.3, 6.7405924015), (3.4, 2.1, 0.7838603495)],
)
def test_incomplete_gamma(stats, s, x, expected):
	assert abs(stats.incomplete_gamma(s, x) - expected) < EPS


@pytest.mark.parametrize(
	("s", "x", "expected"),
	[(3.04, 2, 0.3141290716), (2.7, 1.03, 0.1253792297), (5.7, 0.8, 0.0003451821)],
)
def test_regularised_gamma(stats, s, x, expected):
	assert abs(stats.regularised_gamma(s, x) - expected) < EPS


def test_regularised_gamma_is_monotone_and_bounded(stats):
	values = [stats.regularised_gamma(2.5, 0.5 * i) for i in range(0, 60)]
	assert values[0] == 0
	assert all(0 <= v <= 1 for v in values)
	assert all(b >= a for a, b in zip(values, values[1:]))
	assert values[-1] > 1 - EPS


def _poisson_tail_gamma(s, x):
	# P(s, x) for integer s: one minus the Poisson(x) masses below s
	return 1 - math.fsum(math.exp(k * math.log(x) - x - math.lgamma(k + 1)) for k in range(s))


@pytest.mark.parametrize(("s", "x"), [(1000, 990), (1000, 1050), (5000, 4990), (5000, 5100)])
def test_regularised_gamma_for_large_shapes(stats, s, x):
	assert abs(stats.regularised_gamma(s, x) - _poisson_tail_gamma(s, x)) < 1e-7


def test_regularised_gamma_near_a_large_half_integer_shape(stats):
	assert abs(stats.regularised_gamma(1000.5, 1000) - 0.49790) < 1e-4
	assert stats.regularised_gamma(1000.5, 1000) < stats.regularised_gamma(1000, 1000)


def test_gamma_depth_grows_with_the_shape():
	assert gamma_depth(80, 2.5) == 120
	assert gamma_depth(500, 2.5) == 500
	assert gamma_depth(80, 10000) == 2100


def test_incomplete_gamma_refuses_invalid_arguments(stats):
	assert stats.incomplete_gamma(2.64, -1) is None
	assert stats.regularised_gamma(2.64, -0.3) is None
	assert stats.incomplete_gamma(2.64, None) is None
	assert stats.incomplete_gamma(7, "a") is None
	assert stats.regularised_gamma("a", 7) is None


# --- Beta --------------------------------------------------------------------
@pytest.mark.parametrize(
	("a", "b", "expected"),
	[(4, 3, 0.0166666666), (4, 9, 0.0005050505050505), (11.2, 2.4, 0.00326837)],
)
def test_beta(stats, a, b, expected):
	assert abs(stats.beta(a, b) - expected) < EPS


@pytest.mark.parametrize(
	("x", "a", "b", "expected"),
	[(0.97, 4, 0.5, 0.57808213228), (0.2, 4, 9, 0.00010375305567), (0.5, 11.2, 2.4, 0.0000160799)],
)
def test_incomplete_beta(stats, x, a, b, expected):
	assert abs(stats.incomplete_beta(x, a, b) - expected) < EPS


@pytest.mark.parametrize(
	("x", "a", "b", "expected"),
	[(0.4, 4, 3, 0.1792), (0.2, 4, 9, 0.20543105024), (0.5, 11.2, 2.4, 0.00491987)],
)
def test_regularised_beta(stats, x, a, b, expected):
	assert abs(stats.regularised_beta(x, a, b) - expected) < EPS


@pytest.mark.parametrize(("a", "b"), [(4, 3), (2.5, 3.5), (0.5, 6)])
def test_regularised_beta_is_monotone_and_bounded(stats, a, b):
	values = [stats.regularised_beta(i / 50, a, b) for i in range(51)]
	assert values[0] == 0
	assert values[-1] == 1
	assert all(0 <= v <= 1 for v in values)
	assert all(second >= first - 1e-12 for first, second in zip(values, values[1:]))


def test_regularised_beta_symmetry(stats):
	left = stats.regularised_beta(0.3, 2.5, 4.5)
	right = stats.regularised_beta(0.7, 4.5, 2.5)
	assert abs(left + right - 1) < EPS


def test_regularised_beta_for_large_half_integer_shapes(stats):
	assert abs(stats.regularised_beta(0.5, 550.5, 550.5) - 0.5) < EPS
	middle = stats.regularised_beta(0.49, 550.5, 550.5)
	# decreasing in a, increasing in b
	assert stats.regularised_beta(0.49, 551, 550) < middle < stats.regularised_beta(0.49, 550, 551)
	assert abs(middle + stats.regularised_beta(0.51, 550.5, 550.5) - 1) < EPS


def test_regularised_beta_far_in_the_tail_underflows_to_zero(stats):
	value = stats.regularised_beta(0.005, 1000, 1000.5)
	assert 0 <= value < 1e-12
	assert stats.regularised_beta(0.995, 1000.5, 1000) == pytest.approx(1.0, abs=1e-12)
	assert len(stats.diagnostics) == 0


@pytest.mark.parametrize(("x", "a", "b"), [(0.49, 700, 700), (0.3, 40, 90), (0.62, 300, 200)])
def test_regularised_fraction_agrees_with_the_integer_series(stats, x, a, b):
	depth = fraction_depth(stats.options.incomplete_beta_iterations, a, b)
	if x > (a + 1) / (a + b + 2):
		fraction = 1 - regularised_fraction(1 - x, b, a, depth)
	else:
		fraction = regularised_fraction(x, a, b, depth)
	assert abs(float(fraction) - stats.regularised_beta(x, a, b)) < 1e-8


def test_log_beta_is_finite_past_the_double_range(stats):
	assert math.isclose(log_beta(4, 3), math.log(stats.beta(4, 3)))
	assert math.isfinite(log_beta(1000, 1000.5))
	assert log_beta(1000, 1000.5) < -1000


@pytest.mark.parametrize(
	"call",
	[
		lambda s: s.beta(0, 3),
		lambda s: s.beta(7, -1),
		lambda s: s.beta(3, None),
		lambda s: s.beta(True, 3),
		lambda s: s.incomplete_beta(1.1, 4, 3),
		lambda s: s.incomplete_beta(0.3, 0, 3),
		lambda s: s.incomplete_beta("a", 3, 0.3),
		lambda s: s.regularised_beta(-0.3, 2, 3),
		lambda s: s.regularised_beta(0.7, 7, 0),
		lambda s: s.regularised_beta(0.3, 3, "a"),
	],
)
def test_beta_functions_refuse_invalid_arguments(stats, call):
	assert call(stats) is None
