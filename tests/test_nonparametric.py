"""Mann-Whitney U and Pearson's chi-squared test."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

EPS = 1e-5

WELLNESS = [
	("a", 0), ("b", 1), ("b", 2), ("b", 3), ("b", 4), ("a", 5), ("a", 5.5), ("b", 6), ("b", 6.5), ("a", 7),
	("b", 7.5), ("a", 8), ("b", 8.5), ("a", 9), ("a", 11), ("a", 13), ("a", 28), ("a", 29), ("a", 32), ("a", 33),
]

INCOME = [
	("male", 0), ("female", 400), ("male", 500), ("female", 550), ("male", 600), ("female", 650),
	("male", 750), ("male", 800), ("female", 900), ("female", 950), ("male", 1000), ("male", 1100),
	("female", 1200), ("male", 1500), ("female", 1600), ("male", 1800), ("male", 1900), ("male", 2000),
	("male", 2200), ("male", 3500),
]


# --- Mann-Whitney U ----------------------------------------------------------
@pytest.mark.parametrize(
	("rows", "u", "z", "p_one"),
	[
		(WELLNESS, 19, -2.2373985744, 0.01263),
		(INCOME, 31, -1.1490218350, 0.125273),
	],
)
def test_mann_whitney_u(stats, rows, u, z, p_one):
	groups = [g for g, _ in rows]
	values = [v for _, v in rows]
	result = stats.mann_whitney_u(groups, values)
	assert result.u == u
	assert abs(result.z_score - z) < EPS
	assert abs(result.p_one_tailed - p_one) < EPS
	assert math.isclose(result.p_two_tailed, 2 * result.p_one_tailed)


def test_mann_whitney_u_accepts_pandas_columns(stats):
	frame = pd.DataFrame(WELLNESS, columns=["group", "wellness"])
	result = stats.mann_whitney_u(frame["group"], frame["wellness"])
	assert result.u == 19


def test_mann_whitney_u_corrects_the_variance_for_ties(stats):
	result = stats.mann_whitney_u(["a", "a", "a", "b", "b", "b"], [1, 2, 2, 2, 3, 4])
	# ranks 1, 3, 3 | 3, 5, 6 ; one tie group of three
	variance = 3 * 3 / 12 * (7 - 24 / (6 * 5))
	assert result.u == 1
	assert math.isclose(result.z_score, (1 - 4.5) / math.sqrt(variance))


def test_mann_whitney_u_skips_incomplete_observations(stats):
	groups = ["a", "a", None, "b", "b", "a", "b"]
	values = [1, 2, 3, 4, math.nan, 5, 6]
	result = stats.mann_whitney_u(groups, values)
	complete = stats.mann_whitney_u(["a", "a", "b", "a", "b"], [1, 2, 4, 5, 6])
	assert result == complete


@pytest.mark.parametrize(
	("groups", "values", "kwargs"),
	[
		(["a", "b", "c"], [1, 2, 3], {}),
		(["a", "a", "a"], [1, 2, 3], {}),
		(["a", "b", "a", "b"], [2, 2, 2, 2], {}),
		(["a", "b"], [1, 2], {"scale": "nominal"}),
		(None, [1, 2], {}),
	],
)
def test_mann_whitney_u_refuses_invalid_input(stats, groups, values, kwargs):
	assert stats.mann_whitney_u(groups, values, **kwargs) is None


def test_mann_whitney_u_refuses_non_numeric_values(stats):
	assert stats.mann_whitney_u(["a", "b"], ["high", "low"]) is None
	assert stats.diagnostics.last.kind.value == "type"


@pytest.mark.parametrize(
	("groups", "values"),
	[(["a", "b", "a"], [1, 2]), (["a", "b"], [1, 2, 3, 4])],
)
def test_mann_whitney_u_refuses_variables_of_different_length(stats, groups, values):
	assert stats.mann_whitney_u(groups, values) is None
	assert stats.diagnostics.last.kind.value == "domain"
	assert "same number of observations" in stats.diagnostics.last.message


# --- Chi-squared test --------------------------------------------------------
NEIGHBOURHOOD = [[90, 30, 30], [60, 50, 40], [104, 51, 45], [95, 20, 35]]


def test_chi_squared_test_on_count_matrix(stats):
	result = stats.chi_squared_test(NEIGHBOURHOOD)
	assert abs(result.statistic - 24.57120285) < EPS
	assert abs(result.significance - 0.0004098425) < EPS
	assert result.degrees_of_freedom == 6


def test_chi_squared_test_on_variables(stats):
	gender = ["male"] * 400 + ["female"] * 600
	voting = (
		["republican"] * 200 + ["democrat"] * 150 + ["independent"] * 50
		+ ["republican"] * 250 + ["democrat"] * 300 + ["independent"] * 50
	)
	result = stats.chi_squared_test(gender, voting)
	assert abs(result.statistic - 16.2037037) < EPS
	assert abs(result.significance - 0.0003029775) < EPS
	assert result.degrees_of_freedom == 2

	frame = pd.DataFrame([[200, 150, 50], [250, 300, 50]])
	assert stats.chi_squared_test(frame) == result


def test_chi_squared_test_drops_empty_rows_and_columns(stats):
	with_empty = stats.chi_squared_test([[10, 0, 20], [0, 0, 0], [30, 0, 5]])
	without = stats.chi_squared_test([[10, 20], [30, 5]])
	assert with_empty == without
	assert without.degrees_of_freedom == 1


def test_chi_squared_test_without_degrees_of_freedom(stats):
	result = stats.chi_squared_test(np.array([[5, 10]]))
	assert result.degrees_of_freedom == 0
	assert result.significance == 0


@pytest.mark.parametrize(
	"table",
	[
		(),
		([[1, -2], [3, 4]],),
		([[1, 2], [3]],),
		([[0, 0], [0, 0]],),
		(["a", "b", "c"], ["x", "y"]),
	],
)
def test_chi_squared_test_refuses_invalid_tables(stats, table):
	assert stats.chi_squared_test(*table) is None
