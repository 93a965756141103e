# src/numstat/distributions/chi_squared.py

from __future__ import annotations

import math
from typing import Optional

from ..errors import ErrorKind
from ..logutil import get_logger
from ..numeric import power
from ..special.incomplete_gamma import IncompleteGammaFunctions
from .tables import DistributionTable, steps, table_key

LOG = get_logger(__name__)

__all__ = ["ChiSquaredDistribution"]


class ChiSquaredDistribution(IncompleteGammaFunctions):
	"""Chi-squared density, cumulative values and tables."""

	def _df_violation(self, operation: str, df: float) -> bool:
		if self._non_numeric(operation, df=df):
			return True
		if df <= 0:
			self._fail(ErrorKind.DOMAIN, operation, f"degrees of freedom (df) must be larger than 0, got {df}.")
			return True
		return False

	def _chi_density(self, x: float, df: float) -> float:
		if x <= 0:
			return 0.0
		half = 0.5 * df
		denominator = power(2, half) * self.gamma_spouge(half)
		if math.isinf(denominator):
			return math.exp((half - 1) * math.log(x) - 0.5 * x - half * math.log(2) - math.lgamma(half))
		return power(x, half - 1) * math.exp(-0.5 * x) / denominator

	def chi_squared_probability_density(self, x: float, df: float) -> Optional[float]:
		"""
		Density ``x^(df/2-1) e^(-x/2) / (2^(df/2) Gamma(df/2))``; ``0`` for ``x <= 0``.

		:param x: Point of evaluation.
		:param df: Degrees of freedom ``> 0``.
		:return: Density or ``None`` on invalid input.
		"""
		op = "chi_squared_probability_density"
		if self._df_violation(op, df) or self._non_numeric(op, x=x):
			return None
		return self._chi_density(x, df)

	def chi_squared_distribution(self, df: float) -> Optional[DistributionTable]:
		"""
		Density table from ``x = 0`` on a 0.01 grid.

		For ``df <= 2`` enumeration stops at the first density below ``epsilon``.
		For ``df > 2`` it always covers the mode ``x = df - 2`` and then stops at
		the first density below ``epsilon``.
		"""
		op = "chi_squared_distribution"
		if self._df_violation(op, df):
			return None
		eps = self.epsilon
		table: DistributionTable = {"0.00": 0.0}
		p = 1.0
		for x in steps(1):
			if not ((df <= 2 and p >= eps) or (df > 2 and x <= df - 2) or (df > 2 and p >= eps)):
				break
			p = self._chi_density(x, df)
			if p < eps and x >= df - 2 and df > 2:
				break
			table[table_key(x)] = p
		LOG.debug("%s(df=%s): %d entries", op, df, len(table))
		return table

	def chi_squared_cumulative_value(self, x: float, df: float) -> Optional[float]:
		"""
		``P(X <= x) = P(df/2, x/2)`` (regularised lower incomplete gamma); ``0`` for ``x <= 0``.
		"""
		op = "chi_squared_cumulative_value"
		if self._df_violation(op, df) or self._non_numeric(op, x=x):
			return None
		if x <= 0:
			return 0.0
		return self.regularised_gamma(0.5 * df, 0.5 * x)

	def chi_squared_cumulative_distribution(self, df: float) -> Optional[DistributionTable]:
		"""
		Cumulative table from ``x = 0`` on a 0.01 grid, ending before the
		probability reaches ``1 - epsilon``. Zero probabilities past the origin are skipped.
		"""
		op = "chi_squared_cumulative_distribution"
		if self._df_violation(op, df):
			return None
		limit = 1 - self.epsilon
		table: DistributionTable = {"0.00": 0.0}
		for x in steps(1):
			p = self.regularised_gamma(0.5 * df, 0.5 * x)
			if p >= limit:
				break
			if p > 0:
				table[table_key(x)] = p
		LOG.debug("%s(df=%s): %d entries", op, df, len(table))
		return table
