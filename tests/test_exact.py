"""Barnard's and Fisher's exact tests, the binomial and sign tests and rank assignment."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")
pytest.importorskip("pandas")

from numstat import Statistics  # noqa: E402
from numstat.inference import (  # noqa: E402
	BarnardResult,
	assign_ranks,
	nuisance_grid,
	tie_correction,
	wald_statistic,
)

EPS = 1e-5


def _twin_study(convicted_mono: int, free_mono: int, convicted_di: int, free_di: int):
	cell = ["monozygotic"] * (convicted_mono + free_mono) + ["dizygotic"] * (convicted_di + free_di)
	convicted = (
		["yes"] * convicted_mono + ["no"] * free_mono
		+ ["yes"] * convicted_di + ["no"] * free_di
	)
	return cell, convicted


# --- Barnard -----------------------------------------------------------------
@pytest.mark.parametrize(
	("cells", "wald", "nuisance", "p_one"),
	[
		((2, 10, 15, 3), 3.609941, 0.44446, 0.0001528846),
		((7, 3, 1, 9), -2.738613, 0.510100, 0.0034735),
	],
)
def test_barnards_test_on_cell_counts(stats, cells, wald, nuisance, p_one):
	result = stats.barnards_test(*cells)
	assert isinstance(result, BarnardResult)
	assert abs(result.wald - wald) < EPS
	assert abs(result.nuisance - nuisance) < 0.01
	assert abs(result.p_one_tailed - p_one) < EPS
	assert math.isclose(result.p_two_tailed, 2 * result.p_one_tailed)


def test_barnards_test_accepts_variables_and_count_matrices(stats):
	cell, convicted = _twin_study(2, 10, 15, 3)
	from_variables = stats.barnards_test(cell, convicted)
	from_matrix = stats.barnards_test([[2, 10], [15, 3]])
	from_cells = stats.barnards_test(2, 10, 15, 3)
	assert from_variables == from_cells
	assert from_matrix == from_cells


def test_barnards_test_respects_explicit_levels(stats):
	cell, convicted = _twin_study(7, 3, 1, 9)
	result = stats.barnards_test(
		cell, convicted, first_levels=["monozygotic", "dizygotic"], second_levels=["yes", "no"],
	)
	assert abs(result.wald + 2.738613) < EPS


def test_barnards_test_refuses_large_tables():
	stats = Statistics(suppress_warnings=True, max_barnards_n=20)
	assert stats.barnards_test(2, 10, 15, 3) is None
	assert stats.diagnostics.last.kind.value == "domain"
	assert "max_barnards_n" in stats.diagnostics.last.message


@pytest.mark.parametrize(
	("table", "kind"),
	[
		((), "missing"),
		((1, 2, 3), "missing"),
		((0, 0, 0, 0), "domain"),
		((1, -2, 3, 4), "domain"),
		((1, 2.5, 3, 4), "domain"),
		((1, "a", 3, 4), "type"),
		(([[1, 2, 3], [4, 5, 6]],), "domain"),
	],
)
def test_barnards_test_refuses_invalid_tables(stats, table, kind):
	assert stats.barnards_test(*table) is None
	assert stats.diagnostics.last.kind.value == kind


def test_wald_statistic_and_nuisance_grid():
	assert abs(float(wald_statistic(10, 2, 13, 17, 30)) - 3.609941) < EPS
	assert math.isnan(float(wald_statistic(0, 0, 5, 5, 10)))

	grid = nuisance_grid()
	assert grid[0] == 0
	assert grid.size in (1000, 1001)
	assert (grid < 1).all()
	assert np.all(np.diff(grid) > 0)


# --- Fisher ------------------------------------------------------------------
def test_fishers_exact_test(stats):
	grade = ["pass"] * 9 + ["fail"] * 13 + ["fail"] * 4
	college = ["crane"] * 9 + ["crane"] * 13 + ["egret"] * 4
	result = stats.fishers_exact_test(grade, college, first_levels=["pass", "fail"], second_levels=["crane", "egret"])
	assert abs(result - 0.159197) < EPS
	assert abs(stats.fishers_exact_test(9, 0, 13, 4) - 0.159197) < EPS
	assert abs(stats.fishers_exact_test(1, 9, 11, 3) - 0.001346076) < EPS


def test_fishers_exact_test_pads_a_single_level(stats):
	# "egret" never occurs, so the second column is filled with zeros
	grade = ["pass"] * 3 + ["fail"] * 2
	college = ["crane"] * 5
	assert stats.fishers_exact_test(grade, college) == stats.fishers_exact_test(3, 0, 2, 0)


def test_fishers_exact_test_refuses_incomplete_input(stats):
	assert stats.fishers_exact_test(["pass", "fail"]) is None
	assert stats.fishers_exact_test() is None


# --- Binomial test -----------------------------------------------------------
@pytest.mark.parametrize(
	("yes", "no", "alpha", "p_at_most", "p_at_least"),
	[
		(3, 5, 0.14, 0.99983667, 0.00207901),
		(13, 4, 0.12, 0.95541265, 0.13825221),
	],
)
def test_binomial_test(stats, yes, no, alpha, p_at_most, p_at_least):
	survival = ["yes"] * yes + ["no"] * no
	result = stats.binomial_test(survival, "no", alpha)
	assert result.successes == no
	assert result.trials == yes + no
	assert abs(result.p_at_most - p_at_most) < EPS
	assert abs(result.p_at_least - p_at_least) < EPS
	assert abs(result.p_fewer + result.p_exactly + result.p_more - 1) < EPS


def test_binomial_test_skips_missing_observations(stats):
	survival = ["yes", None, "no", "no", math.nan, "yes"]
	result = stats.binomial_test(survival, "yes")
	assert result.trials == 4
	assert result.successes == 2


@pytest.mark.parametrize(
	("args", "kwargs", "kind"),
	[
		((["yes", "no"], None), {}, "missing"),
		((None, "no"), {}, "missing"),
		((["yes", "no", "maybe"], "no"), {}, "domain"),
		((["yes", "no"], "maybe"), {}, "domain"),
		((["yes", "no"], "no"), {"alpha": 1.5}, "domain"),
		((["yes", "no"], "no"), {"alpha": "a"}, "type"),
		(([1, 2, 1], 1), {"scale": "metric"}, "domain"),
	],
)
def test_binomial_test_refuses_invalid_input(stats, args, kwargs, kind):
	assert stats.binomial_test(*args, **kwargs) is None
	assert stats.diagnostics.last.kind.value == kind


# --- Sign test ---------------------------------------------------------------
def test_sign_test_matched_pairs(stats):
	hind = [142, 140, 144, 144, 142, 146, 149, 150, 142, 148]
	fore = [138, 136, 147, 139, 143, 141, 143, 145, 136, 146]
	result = stats.sign_test(hind, fore)
	assert result.positives == 8
	assert result.trials == 10
	assert abs(result.p_at_least * 2 - 0.109375) < EPS


def test_sign_test_keeps_ties_in_the_trials(stats):
	a = [0] * 25 + [1] * 11 + [0] * 7
	b = [1] * 25 + [0] * 11 + [0] * 7
	result = stats.sign_test(b, a)
	assert result.positives == 25
	assert result.trials == 43
	assert abs(result.p_exactly - 0.069162416) < EPS


def test_sign_test_refuses_nominal_data(stats):
	assert stats.sign_test([1, 2, 3], [3, 2, 1], scale="nominal") is None
	assert stats.sign_test([1, 2, 3], None) is None


# --- Ranking -----------------------------------------------------------------
def test_assign_ranks_uses_mean_ranks_for_ties():
	ranked = assign_ranks([20, 10, 30, 20])
	assert ranked.values == [10, 20, 20, 30]
	assert ranked.ranks == [1, 2.5, 2.5, 4]
	assert ranked.positions == [1, 0, 3, 2]
	assert ranked.frequencies == {10.0: 1, 20.0: 2, 30.0: 1}
	assert ranked.by_position() == [2.5, 1, 4, 2.5]
	assert sorted(ranked.tie_groups()) == [1, 1, 2]


def test_assign_ranks_descending():
	ranked = assign_ranks([20, 10, 30, 20], order="desc")
	assert ranked.values == [30, 20, 20, 10]
	assert ranked.by_position() == [2.5, 4, 1, 2.5]


def test_assign_ranks_random_ties_are_reproducible():
	first = assign_ranks([5, 5, 5, 1], ties="random", random_state=7)
	second = assign_ranks([5, 5, 5, 1], ties="random", random_state=7)
	assert first.ranks == second.ranks
	assert first.ranks[0] == 1
	assert sorted(first.ranks[1:]) == [2, 3, 4]


@pytest.mark.parametrize(("kwargs",), [({"order": "sideways"},), ({"ties": "first"},)])
def test_assign_ranks_rejects_unknown_policies(kwargs):
	with pytest.raises(ValueError):
		assign_ranks([1, 2, 3], **kwargs)


def test_tie_correction():
	assert tie_correction({1.0: 2, 2.0: 1, 3.0: 3}) == 30
	assert tie_correction(assign_ranks([1, 2, 3]).frequencies) == 0
