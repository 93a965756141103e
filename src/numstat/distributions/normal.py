# src/numstat/distributions/normal.py

from __future__ import annotations

import math
import sys
from typing import Optional

from ..engine import EngineBase
from ..errors import ErrorKind
from ..logutil import get_logger
from ..numeric import normal_round
from .tables import DistributionTable, ordered_table, steps, table_key

LOG = get_logger(__name__)

__all__ = ["NormalDistribution", "normal_series_value", "erf_approximation", "inverse_erf_approximation"]

SQRT_TWO_PI = math.sqrt(2 * math.pi)
# exp(-z*z/2) underflows beyond this |z|
_Z_UNDERFLOW = 38.0
Z_TABLE_MAX = 409  # z = 0.00 .. 4.09


def normal_series_value(z: float, iterations: int = 25) -> float:
	"""
	Standard normal CDF from the power series ``sum z^(2i+1) / (1*3*...*(2i+1))``.

	At least ``iterations`` terms are summed; summation continues while further
	terms still change the result.

	:param z: Standard score.
	:param iterations: Minimum number of series terms.
	:return: ``Phi(z)`` clamped to ``[0, 1]`` (not rounded).
	"""
	if abs(z) >= _Z_UNDERFLOW:
		return 1.0 if z > 0 else 0.0
	total = z
	product = z
	i = 1
	while i < iterations or abs(product) > abs(total) * sys.float_info.epsilon:
		product *= z * z / (2 * i + 1)
		total += product
		i += 1
	value = 0.5 + (total / SQRT_TWO_PI) * math.exp(-0.5 * z * z)
	return min(1.0, max(0.0, value))


def erf_approximation(x: float) -> float:
	"""Gauss error function from the Numerical Recipes ``erfc`` Chebyshev fit (|error| < 1.2e-7)."""
	t = 1 / (1 + 0.5 * abs(x))
	tau = (
		-x * x - 1.26551223 + 1.00002368 * t + 0.37409196 * t ** 2
		+ 0.09678418 * t ** 3 - 0.18628806 * t ** 4
		+ 0.27886807 * t ** 5 - 1.13520398 * t ** 6
		+ 1.48851587 * t ** 7 - 0.82215223 * t ** 8
		+ 0.17087277 * t ** 9
	)
	tau = math.exp(tau) * t
	return 1 - tau if x >= 0 else tau - 1


def inverse_erf_approximation(x: float) -> float:
	"""Inverse error function on ``(-1, 1)`` (Giles' single precision polynomial)."""
	w = -math.log((1.0 - x) * (1.0 + x))
	if w < 5:
		w -= 2.5
		p = 2.81022636e-08
		for c in (3.43273939e-07, -3.5233877e-06, -4.39150654e-06, 0.00021858087,
		          -0.00125372503, -0.00417768164, 0.246640727, 1.50140941):
			p = c + p * w
	else:
		w = math.sqrt(w) - 3
		p = -0.000200214257
		for c in (0.000100950558, 0.00134934322, -0.00367342844, 0.00573950773,
		          -0.0076224613, 0.00943887047, 1.00167406, 2.83297682):
			p = c + p * w
	return p * x


class NormalDistribution(EngineBase):
	"""Normal density, cumulative values and tables; error function and probit."""

	def _variance_violation(self, operation: str, variance: float) -> bool:
		if variance <= 0:
			self._fail(ErrorKind.DOMAIN, operation, f"variance must be larger than 0, got {variance}.")
			return True
		return False

	def normal_probability_density(self, x: float, mean: float = 0, variance: float = 1) -> Optional[float]:
		"""
		Density of ``N(mean, variance)`` at ``x``.

		:param x: Point of evaluation.
		:param mean: Expected value.
		:param variance: Variance ``> 0``.
		:return: Density or ``None`` on invalid input.
		"""
		op = "normal_probability_density"
		if self._non_numeric(op, x=x, mean=mean, variance=variance) or self._variance_violation(op, variance):
			return None
		y = -((x - mean) ** 2) / (2 * variance)
		return math.exp(y) / math.sqrt(2 * math.pi * variance)

	def normal_distribution(self, mean: float = 0, variance: float = 1) -> Optional[DistributionTable]:
		"""
		Density table of ``N(mean, variance)`` on a 0.01 grid symmetric around the mean.

		Enumeration stops at the first density below ``epsilon``.

		:return: ``{"x.xx": density}`` ordered by x, or ``None`` on invalid input.
		"""
		op = "normal_distribution"
		if self._non_numeric(op, mean=mean, variance=variance) or self._variance_violation(op, variance):
			return None
		table: DistributionTable = {}
		denominator = math.sqrt(2 * math.pi * variance)
		for x in steps():
			p = math.exp(-(x * x) / (2 * variance)) / denominator
			if p < self.epsilon:
				break
			table[table_key(mean + x)] = p
			table[table_key(mean - x)] = p
		LOG.debug("%s: %d entries", op, len(table))
		return ordered_table(table)

	def normal_cumulative_value(self, z: float) -> Optional[float]:
		"""
		Standard normal cumulative probability ``Phi(z)``, rounded half-up to 5 decimals.

		:param z: Standard score.
		:return: Probability or ``None`` on invalid input.
		"""
		if self._non_numeric("normal_cumulative_value", z=z):
			return None
		return normal_round(normal_series_value(z, self.options.z_table_iterations), 5)

	def normal_cumulative_distribution(self) -> DistributionTable:
		"""
		Standard normal cumulative table for ``z = 0.00 .. 4.09``.

		Built once per engine and memoized; a copy is returned.
		"""
		if self._normal_table is None:
			with self._normal_table_lock:
				if self._normal_table is None:
					iterations = self.options.z_table_iterations
					self._normal_table = {
						table_key(i / 100): normal_round(normal_series_value(i / 100, iterations), 5)
						for i in range(Z_TABLE_MAX + 1)
					}
					LOG.debug("Built standard normal table with %d entries", len(self._normal_table))
		return dict(self._normal_table)

	def gaussian_error(self, x: float) -> Optional[float]:
		"""Gauss error function ``erf(x)`` (approximation, absolute error below 1.2e-7)."""
		if self._non_numeric("gaussian_error", x=x):
			return None
		return erf_approximation(x)

	def inverse_gaussian_error(self, x: float) -> Optional[float]:
		"""
		Inverse error function for ``-1 <= x <= 1``; ``±1`` map to ``±inf``.
		"""
		op = "inverse_gaussian_error"
		if self._non_numeric(op, x=x):
			return None
		if x < -1 or x > 1:
			return self._fail(ErrorKind.DOMAIN, op, f"x must lie within [-1, 1], got {x}.")
		if abs(x) == 1:
			return math.copysign(math.inf, x)
		return inverse_erf_approximation(x)

	def probit(self, quantile: float) -> Optional[float]:
		"""
		Quantile function of the standard normal distribution.

		:param quantile: Probability in ``[0, 1]``; ``0`` and ``1`` give ``-inf`` and ``inf``.
		:return: ``z`` with ``Phi(z) = quantile`` or ``None`` on invalid input.
		"""
		op = "probit"
		if self._non_numeric(op, quantile=quantile):
			return None
		if quantile < 0 or quantile > 1:
			return self._fail(ErrorKind.DOMAIN, op, f"Probit is only defined for quantiles within [0, 1], got {quantile}.")
		if quantile == 0:
			return -math.inf
		if quantile == 1:
			return math.inf
		return math.sqrt(2) * inverse_erf_approximation(2 * quantile - 1)
