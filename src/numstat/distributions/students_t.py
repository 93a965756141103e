# src/numstat/distributions/students_t.py

from __future__ import annotations

import math
from typing import List, Optional

from ..errors import ErrorKind
from ..imports import numpy as np  # type: ignore
from ..logutil import get_logger
from ..numeric import power
from ..special.beta import BetaFunctions, fraction_depth, regularised_fraction
from .tables import STEP, DistributionTable, ordered_table, steps, table_key

LOG = get_logger(__name__)

TABLE_BLOCK = 4096

__all__ = ["StudentsTDistribution"]


class StudentsTDistribution(BetaFunctions):
	"""Student's t density, cumulative values and tables."""

	def _df_violation(self, operation: str, df: float) -> bool:
		if self._non_numeric(operation, df=df):
			return True
		if df <= 0:
			self._fail(ErrorKind.DOMAIN, operation, f"degrees of freedom (df) must be larger than 0, got {df}.")
			return True
		return False

	def _t_density(self, t: float, df: float, normaliser: float) -> float:
		return power(1 + (t * t) / df, -0.5 * (df + 1)) / normaliser

	def students_t_probability_density(self, t: float, df: float) -> Optional[float]:
		"""
		Density ``(1 + t^2/df)^(-(df+1)/2) / (sqrt(df) B(1/2, df/2))``.

		:param t: Point of evaluation.
		:param df: Degrees of freedom ``> 0``.
		:return: Density or ``None`` on invalid input.
		"""
		op = "students_t_probability_density"
		if self._df_violation(op, df) or self._non_numeric(op, t=t):
			return None
		return self._t_density(t, df, math.sqrt(df) * self.beta(0.5, 0.5 * df))

	def students_t_distribution(self, df: float) -> Optional[DistributionTable]:
		"""Density table on a 0.01 grid symmetric around 0, stopping below ``epsilon``."""
		op = "students_t_distribution"
		if self._df_violation(op, df):
			return None
		normaliser = math.sqrt(df) * self.beta(0.5, 0.5 * df)
		table: DistributionTable = {}
		for t in steps():
			p = self._t_density(t, df, normaliser)
			if p < self.epsilon:
				break
			table[table_key(t)] = p
			table[table_key(-t)] = p
		LOG.debug("%s(df=%s): %d entries", op, df, len(table))
		return ordered_table(table)

	def students_t_cumulative_value(self, t: float, df: float) -> Optional[float]:
		"""
		``P(T <= t)`` through the regularised incomplete beta.

		``t <= 0``: ``I_(df/(t^2+df))(df/2, 1/2) / 2``;
		``t > 0``: ``1/2 + I_(t^2/(t^2+df))(1/2, df/2) / 2``.

		:param t: Statistic.
		:param df: Degrees of freedom ``> 0``.
		:return: Probability or ``None`` on invalid input.
		"""
		op = "students_t_cumulative_value"
		if self._df_violation(op, df) or self._non_numeric(op, t=t):
			return None
		if t <= 0:
			return 0.5 * self.regularised_beta(df / (t * t + df), 0.5 * df, 0.5)
		return 0.5 + 0.5 * self.regularised_beta(t * t / (t * t + df), 0.5, 0.5 * df)

	def _upper_cumulative(self, t, df: float):
		"""``P(T <= t)`` for an array of ``t >= 0``; same branches as :meth:`regularised_beta`."""
		a, b = 0.5, 0.5 * df
		depth = fraction_depth(self.options.incomplete_beta_iterations, a, b)
		tt = t * t
		x = tt / (tt + df)
		with np.errstate(divide="ignore", invalid="ignore"):
			direct = regularised_fraction(x, a, b, depth)
			mirrored = 1.0 - regularised_fraction(df / (tt + df), b, a, depth)
			beta = np.where(x > (a + 1) / (a + b + 2), mirrored, direct)
		return 0.5 + 0.5 * np.clip(beta, 0.0, 1.0)

	def students_t_cumulative_distribution(self, df: float) -> Optional[DistributionTable]:
		"""
		Cumulative table on a 0.01 grid symmetric around 0.

		Enumeration runs while the probability stays at or below ``1 - epsilon``
		and stops as soon as it no longer increases. Negative keys hold ``1 - P``.
		The grid is evaluated in blocks of ``TABLE_BLOCK`` points.
		"""
		op = "students_t_cumulative_distribution"
		if self._df_violation(op, df):
			return None
		upper: List[float] = []
		previous = -0.1
		start = 0
		done = False
		while not done:
			grid = np.arange(start, start + TABLE_BLOCK) * STEP
			for p in self._upper_cumulative(grid, df).tolist():
				if previous >= p:
					done = True
					break
				upper.append(p)
				previous = p
				if p > 1 - self.epsilon:
					done = True
					break
			start += TABLE_BLOCK

		table: DistributionTable = {table_key(-i * STEP): 1 - upper[i] for i in range(len(upper) - 1, 0, -1)}
		table.update((table_key(i * STEP), p) for i, p in enumerate(upper))
		LOG.debug("%s(df=%s): %d entries", op, df, len(table))
		return table
