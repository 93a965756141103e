# src/numstat/inference/nonparametric.py

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from ..data import Scale, is_missing
from ..data.scale import ScaleLike
from ..distributions.chi_squared import ChiSquaredDistribution
from ..distributions.normal import NormalDistribution
from ..errors import ErrorKind
from ..logutil import get_logger
from ..numeric import is_numeric
from .ranking import assign_ranks, tie_correction
from .results import ChiSquaredTestResult, MannWhitneyResult

LOG = get_logger(__name__)

__all__ = ["NonparametricTests"]


class NonparametricTests(NormalDistribution, ChiSquaredDistribution):
	"""Rank and frequency based tests."""

	def mann_whitney_u(
			self,
			groups: Any,
			values: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[MannWhitneyResult]:
		"""
		Mann-Whitney U test of two independent samples.

		``groups`` has to hold exactly two distinct labels; the first one to appear
		defines the first sample. Ranks are ascending with mean ranks for ties; the
		normal approximation uses the tie-corrected variance
		``n1 n2 / 12 ((n + 1) - sum(t^3 - t) / (n (n - 1)))``.

		:param groups: Group labels (nominal).
		:param values: Observations (at least ordinal).
		:param scale: Declared scale of ``values``.
		:return: :class:`MannWhitneyResult` or ``None`` on invalid input.
		"""
		op = "mann_whitney_u"
		labels = self._values(groups, op, Scale.NOMINAL)
		if labels is None:
			return None
		observations = self._values(values, op, Scale.ORDINAL, scale)
		if observations is None:
			return None
		if len(labels) != len(observations):
			return self._fail(
				ErrorKind.DOMAIN, op,
				f"Both variables need the same number of observations, got {len(labels)} and {len(observations)}.",
			)
		pairs = [
			(label, value) for label, value in zip(labels, observations)
			if not is_missing(label) and is_numeric(value)
		]
		levels = list(dict.fromkeys(label for label, _ in pairs))
		if len(levels) != 2:
			return self._fail(
				ErrorKind.DOMAIN, op,
				f"The Mann-Whitney U test requires the grouping variable to have exactly two unique values, "
				f"got {len(levels)}: {levels}",
			)

		ranked = assign_ranks([value for _, value in pairs])
		ranks = ranked.by_position()
		n = len(pairs)
		n_first = sum(1 for label, _ in pairs if label == levels[0])
		n_second = n - n_first
		rank_sum_first = sum(r for (label, _), r in zip(pairs, ranks) if label == levels[0])
		rank_sum_second = sum(ranks) - rank_sum_first

		u_first = n_first * (0.5 * n_first + n_second + 0.5) - rank_sum_first
		u_second = n_second * (0.5 * n_second + n_first + 0.5) - rank_sum_second
		u = min(u_first, u_second)

		ties = tie_correction(ranked.frequencies)
		variance = n_first * n_second / 12 * ((n + 1) - ties / (n * (n - 1)))
		if variance <= 0:
			return self._fail(ErrorKind.DOMAIN, op, "All observations are tied; the test statistic is undefined.")
		z = (u - 0.5 * n_first * n_second) / math.sqrt(variance)
		p = 1 - self.normal_cumulative_value(abs(z))
		return MannWhitneyResult(u=u, z_score=z, p_one_tailed=p, p_two_tailed=2 * p)

	def chi_squared_test(
			self,
			*table: Any,
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional[ChiSquaredTestResult]:
		"""
		Pearson's chi-squared test of independence on an r x c table.

		Expected counts are ``row total * column total / total``; rows and columns
		without observations are dropped. ``df = (r - 1)(c - 1)``; for ``df < 1``
		the significance is reported as ``0``.

		:param table: One count matrix or two categorical variables.
		:param first_levels: Row order when two variables are given.
		:param second_levels: Column order when two variables are given.
		:return: :class:`ChiSquaredTestResult` or ``None`` on invalid input.
		"""
		op = "chi_squared_test"
		frame = self._table(op, table, first_levels, second_levels)
		if frame is None:
			return None
		observed = frame.to_numpy(dtype=float)
		observed = observed[observed.sum(axis=1) > 0][:, observed.sum(axis=0) > 0]
		total = observed.sum()
		if total == 0:
			return self._fail(ErrorKind.DOMAIN, op, "The table contains no observations.")

		expected = observed.sum(axis=1)[:, None] * observed.sum(axis=0)[None, :] / total
		statistic = float(((observed - expected) ** 2 / expected).sum())
		rows, cols = observed.shape
		df = (rows - 1) * (cols - 1)
		if statistic < 0 or df < 1:
			significance = 0.0
		else:
			significance = 1 - self.chi_squared_cumulative_value(statistic, df)
		LOG.debug("%s: %dx%d table, statistic=%.6f, df=%d", op, rows, cols, statistic, df)
		return ChiSquaredTestResult(statistic=statistic, degrees_of_freedom=df, significance=significance)
