# src/numstat/distributions/poisson.py

from __future__ import annotations

import math
from typing import List, Optional

from ..errors import ErrorKind
from ..logutil import get_logger
from ..numeric import is_integer, power
from ..special.gamma import GammaFunctions
from ..special.summation import kahan_sum

LOG = get_logger(__name__)

__all__ = ["poisson_mass", "PoissonDistribution"]


def poisson_mass(k: int, lam: float, factorial_k: Optional[int] = None) -> float:
	"""
	``P(X = k)`` for ``X ~ Poisson(lam)``.

	For ``k > 10`` the mass is ``exp(k log lam - lam - log k!)`` so that neither
	``lam^k`` nor ``k!`` is formed and large rates stay finite.
	"""
	if k > 10:
		return math.exp(k * math.log(lam) - lam - math.lgamma(k + 1))
	if factorial_k is None:
		factorial_k = math.factorial(k)
	scale = math.exp(-lam)
	if scale == 0.0:
		return 0.0
	return scale * power(lam, k) / factorial_k


class PoissonDistribution(GammaFunctions):
	"""Poisson probability mass, cumulative values and tables."""

	def _lambda_violation(self, operation: str, lam: float) -> bool:
		if self._non_numeric(operation, lam=lam):
			return True
		if lam <= 0:
			self._fail(ErrorKind.DOMAIN, operation, f"lambda must be larger than 0, got {lam}.")
			return True
		return False

	def _count_violation(self, operation: str, k: float) -> bool:
		if self._non_numeric(operation, k=k):
			return True
		if k < 0 or not is_integer(k):
			self._fail(ErrorKind.DOMAIN, operation, f"k must be a non-negative integer, got {k}.")
			return True
		return False

	def poisson_probability_mass(self, k: int, lam: float = 1) -> Optional[float]:
		"""
		``P(X = k)`` for ``X ~ Poisson(lam)``.

		:param k: Number of events.
		:param lam: Rate ``> 0``.
		:return: Probability or ``None`` on invalid input.
		"""
		op = "poisson_probability_mass"
		if self._count_violation(op, k) or self._lambda_violation(op, lam):
			return None
		k = int(k)
		return poisson_mass(k, lam, self.factorials.get_or_compute(k) if k <= 10 else None)

	def poisson_distribution(self, lam: float = 1) -> Optional[List[float]]:
		"""
		Masses ``P(X = 0), P(X = 1), ...`` until their sum reaches ``1 - epsilon``.
		"""
		if self._lambda_violation("poisson_distribution", lam):
			return None
		distribution: List[float] = []
		total = 0.0
		k = 0
		while total < 1 - self.epsilon:
			p = poisson_mass(k, lam, self.factorials.get_or_compute(k) if k <= 10 else None)
			distribution.append(p)
			total += p
			k += 1
		LOG.debug("poisson_distribution(lam=%s): %d entries", lam, len(distribution))
		return distribution

	def poisson_cumulative_value(self, k: int, lam: float = 1) -> Optional[float]:
		"""
		``P(X <= k)``: compensated sum of the masses up to ``k``; ``1`` once ``k`` reaches the tabulated tail.
		"""
		op = "poisson_cumulative_value"
		if self._count_violation(op, k) or self._lambda_violation(op, lam):
			return None
		distribution = self.poisson_distribution(lam)
		k = int(k)
		if k < len(distribution) - 1:
			return kahan_sum(distribution[:k + 1])
		return 1.0

	def poisson_cumulative_distribution(self, lam: float = 1) -> Optional[List[float]]:
		"""Running compensated sums of :meth:`poisson_distribution`."""
		distribution = self.poisson_distribution(lam)
		if distribution is None:
			return None
		running = 0.0
		cumulative: List[float] = []
		for item in distribution:
			running = kahan_sum([running, item])
			cumulative.append(running)
		return cumulative
