# src/numstat/inference/exact.py

from __future__ import annotations

from typing import Any, Optional, Sequence

from ..data import Scale, drop_missing
from ..data.scale import ScaleLike
from ..distributions.binomial import BinomialDistribution
from ..errors import ErrorKind
from ..imports import numpy as np  # type: ignore
from ..logutil import get_logger
from ..special.gamma import binomial_ratio_product
from ..special.summation import kahan_sum
from .results import BarnardResult, BinomialTestResult, SignTestResult

LOG = get_logger(__name__)

__all__ = ["ExactTests", "wald_statistic", "nuisance_grid"]

NUISANCE_STEP = 0.001


def wald_statistic(first: Any, second: Any, first_total: float, second_total: float, total: float) -> Any:
	"""
	Unconditional Wald statistic of two proportions.

	``(first/first_total - second/second_total) / sqrt(q (1-q) (1/first_total + 1/second_total))``
	with the pooled proportion ``q = (first + second) / total``. Works element-wise
	on arrays; undefined cells come out as ``NaN``.
	"""
	first_total = np.float64(first_total)
	second_total = np.float64(second_total)
	with np.errstate(divide="ignore", invalid="ignore"):
		q = (first + second) / np.float64(total)
		q = q * (1 - q) * ((1 / first_total) + (1 / second_total))
		return (first / first_total - second / second_total) / np.sqrt(q)


def nuisance_grid(step: float = NUISANCE_STEP) -> "np.ndarray":
	"""Nuisance values ``0, step, 2 step, ...`` below 1, accumulated by compensated addition."""
	values = []
	current = 0.0
	while current < 1:
		values.append(current)
		current = kahan_sum([current, step])
	return np.asarray(values)


class ExactTests(BinomialDistribution):
	"""Barnard's and Fisher's tests on 2x2 tables; binomial and sign tests."""

	def barnards_test(
			self,
			*table: Any,
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional[BarnardResult]:
		"""
		Barnard's unconditional exact test of a 2x2 table.

		The table is given as four cell counts ``(a, b, c, d)`` (rows ``a b`` and
		``c d``), as one 2x2 count matrix, or as two dichotomous variables. For every
		nuisance value ``pi`` in ``0, 0.001, ... < 1`` the probabilities of all tables
		with the same column totals and an at least as extreme Wald statistic are
		summed; the largest sum is the two-tailed p-value.

		The grid search costs ``O(1000 (a+c) (b+d))``; tables with more than
		``max_barnards_n`` observations are refused.

		:param table: Cell counts, a count matrix or two variables.
		:param first_levels: Row order when two variables are given.
		:param second_levels: Column order when two variables are given.
		:return: :class:`BarnardResult` or ``None`` on invalid input.
		"""
		op = "barnards_test"
		cells = self._two_by_two(op, table, first_levels, second_levels)
		if cells is None:
			return None
		a, b, c, d = cells
		total = a + b + c + d
		if total == 0:
			return self._fail(ErrorKind.DOMAIN, op, "The table contains no observations.")
		if total > self.options.max_barnards_n:
			return self._fail(
				ErrorKind.DOMAIN, op,
				f"Barnard's test is a resource-intensive method. There are {total} observations in the supplied "
				f"data, exceeding the maximum of {self.options.max_barnards_n}. Raise the 'max_barnards_n' "
				f"option to allow larger tables (be cautious).",
			)

		first_total, second_total = a + c, b + d
		wald = float(wald_statistic(b, a, second_total, first_total, total))
		if np.isnan(wald):
			wald = 0.0

		i = np.arange(first_total + 1, dtype=float)[:, None]
		j = np.arange(second_total + 1, dtype=float)[None, :]
		extreme = wald_statistic(i, j, first_total, second_total, total)
		mask = ~np.isnan(extreme) & (np.abs(extreme) >= abs(wald))

		first_coefficients = np.array([binomial_ratio_product(first_total, k) for k in range(first_total + 1)])
		second_coefficients = np.array([binomial_ratio_product(second_total, k) for k in range(second_total + 1)])
		weights = np.outer(first_coefficients, second_coefficients) * mask
		successes = (i + j).astype(int)
		# combined weight per number of successes i + j
		by_successes = np.bincount(successes.ravel(), weights=weights.ravel(), minlength=total + 1)

		grid = nuisance_grid()
		s = np.arange(total + 1, dtype=float)
		with np.errstate(under="ignore"):
			surface = np.power(grid[:, None], s) * np.power(1 - grid[:, None], total - s)
		significance = surface @ by_successes
		best = int(np.argmax(significance))
		LOG.debug(
			"%s: table=(%d, %d, %d, %d), %d nuisance values, max at pi=%.3f",
			op, a, b, c, d, grid.size, grid[best],
		)
		p_two = float(significance[best])
		return BarnardResult(
			wald=wald,
			nuisance=float(grid[best]),
			p_one_tailed=0.5 * p_two,
			p_two_tailed=p_two,
		)

	def fishers_exact_test(
			self,
			*table: Any,
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional[float]:
		"""
		Hypergeometric probability ``C(a+b, a) C(c+d, c) / C(n, a+c)`` of the observed 2x2 table.

		:param table: Cell counts, a count matrix or two variables (see :meth:`barnards_test`).
		:return: Probability or ``None`` on invalid input.
		"""
		op = "fishers_exact_test"
		cells = self._two_by_two(op, table, first_levels, second_levels)
		if cells is None:
			return None
		a, b, c, d = cells
		if a + b + c + d == 0:
			return self._fail(ErrorKind.DOMAIN, op, "The table contains no observations.")
		return (
			binomial_ratio_product(a + b, a) * binomial_ratio_product(c + d, c)
			/ binomial_ratio_product(a + b + c + d, a + c)
		)

	def _binomial_tails(self, k: int, n: int, probability: float):
		exactly = self.binomial_probability_mass(k, n, probability)
		fewer = self.binomial_cumulative_value(k - 1, n, probability) if k > 0 else 0.0
		if exactly is None or fewer is None:
			return None
		more = 1 - fewer - exactly
		return dict(
			p_exactly=exactly,
			p_fewer=fewer,
			p_at_most=fewer + exactly,
			p_more=more,
			p_at_least=more + exactly,
		)

	def binomial_test(
			self,
			data: Any,
			value: Any,
			alpha: float = 0.5,
			scale: Optional[ScaleLike] = None,
	) -> Optional[BinomialTestResult]:
		"""
		Exact binomial test of a dichotomous variable.

		``successes`` counts the occurrences of ``value``; the probabilities refer
		to ``B(n, alpha)``.

		:param data: Dichotomous observations (nominal or ordinal).
		:param value: Value whose frequency is tested.
		:param alpha: Hypothesised probability of ``value``.
		:param scale: Declared scale of ``data``; interval and metric data are refused.
		:return: :class:`BinomialTestResult` or ``None`` on invalid input.
		"""
		op = "binomial_test"
		if value is None:
			return self._fail(
				ErrorKind.MISSING, op,
				"The binomial test requires a value hypothesised to be observed with probability alpha.",
			)
		if self._non_numeric(op, alpha=alpha):
			return None
		if alpha < 0 or alpha > 1:
			return self._fail(ErrorKind.DOMAIN, op, f"alpha must lie within [0, 1], got {alpha}.")
		values = self._values(data, op, Scale.NOMINAL, scale)
		if values is None:
			return None
		if scale is not None and Scale.parse(scale) > Scale.ORDINAL:
			return self._fail(ErrorKind.DOMAIN, op, "The binomial test is only defined for nominal or ordinal dichotomous data.")
		values, _ = drop_missing(values)
		uniques = list(dict.fromkeys(values))
		if len(uniques) > 2:
			return self._fail(
				ErrorKind.DOMAIN, op,
				f"The binomial test is only defined for dichotomous data. The supplied data has {len(uniques)} unique values.",
			)
		if len(uniques) == 2 and value not in uniques:
			return self._fail(ErrorKind.DOMAIN, op, f"The value {value!r} was not found in the supplied data.")

		k = sum(1 for v in values if v == value)
		tails = self._binomial_tails(k, len(values), alpha)
		if tails is None:
			return None
		return BinomialTestResult(successes=k, trials=len(values), **tails)

	def sign_test(
			self,
			first: Any,
			second: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[SignTestResult]:
		"""
		Sign test of paired ordinal observations.

		``positives`` counts the pairs with ``first > second``; ties stay in the
		number of trials. The tails refer to ``B(n, 0.5)``.

		:return: :class:`SignTestResult` or ``None`` on invalid input.
		"""
		op = "sign_test"
		pairs = self._paired(first, second, op, Scale.ORDINAL, scale)
		if pairs is None:
			return None
		positives = sum(1 for x, y in zip(pairs.first, pairs.second) if x > y)
		tails = self._binomial_tails(positives, len(pairs), 0.5)
		if tails is None:
			return None
		return SignTestResult(positives=positives, trials=len(pairs), **tails)
