# src/numstat/distributions/binomial.py

from __future__ import annotations

from typing import List, Optional

from ..errors import ErrorKind
from ..numeric import is_integer, power
from ..special.beta import BetaFunctions
from ..special.gamma import binomial_ratio_product
from ..special.summation import kahan_sum

__all__ = ["BinomialDistribution"]


class BinomialDistribution(BetaFunctions):
	"""Binomial probability mass, cumulative values and tables."""

	def _binomial_invalid(self, operation: str, n: float, probability: float, k: Optional[float] = None,
	                      check_k: bool = False) -> bool:
		named = {"k": k} if check_k else {}
		named.update(n=n, probability=probability)
		if self._non_numeric(operation, **named):
			return True
		if check_k and (k < 0 or not is_integer(k)):
			self._fail(ErrorKind.DOMAIN, operation, f"k must be a non-negative integer, got {k}.")
			return True
		if n < 0 or not is_integer(n):
			self._fail(ErrorKind.DOMAIN, operation, f"n must be a non-negative integer, got {n}.")
			return True
		if probability < 0 or probability > 1:
			self._fail(ErrorKind.DOMAIN, operation, f"The probability must lie within the range of [0, 1], got {probability}.")
			return True
		return False

	def binomial_probability_mass(self, k: int, n: int = 10, probability: float = 0.5) -> Optional[float]:
		"""
		``P(X = k)`` for ``X ~ B(n, probability)``.

		:param k: Number of successes; ``k > n`` has probability ``0``.
		:param n: Number of trials.
		:param probability: Success probability per trial.
		:return: Probability or ``None`` on invalid input.
		"""
		if self._binomial_invalid("binomial_probability_mass", n, probability, k, check_k=True):
			return None
		k, n = int(k), int(n)
		if k > n:
			return 0.0
		return binomial_ratio_product(n, k) * power(probability, k) * power(1 - probability, n - k)

	def binomial_distribution(self, n: int = 10, probability: float = 0.5) -> Optional[List[float]]:
		"""
		Probability masses ``P(X = 0) .. P(X = n)``.

		The coefficient is carried along as ``C(n, y+1) = C(n, y) (n - y) / (y + 1)``.
		"""
		if self._binomial_invalid("binomial_distribution", n, probability):
			return None
		n = int(n)
		distribution: List[float] = []
		coefficient = 1.0
		for y in range(n + 1):
			distribution.append(coefficient * power(probability, y) * power(1 - probability, n - y))
			coefficient = coefficient * (n - y) / (y + 1)
		return distribution

	def binomial_cumulative_value(self, k: int, n: int = 10, probability: float = 0.5) -> Optional[float]:
		"""
		``P(X <= k)`` via ``I_(1-p)(n - k, k + 1)``.

		:param k: Number of successes; ``k >= n`` gives ``1``.
		:param n: Number of trials.
		:param probability: Success probability per trial.
		:return: Probability or ``None`` on invalid input.
		"""
		if self._binomial_invalid("binomial_cumulative_value", n, probability, k, check_k=True):
			return None
		k, n = int(k), int(n)
		if k >= n:
			return 1.0
		return self.regularised_beta(1 - probability, n - k, k + 1)

	def binomial_cumulative_distribution(self, n: int = 10, probability: float = 0.5) -> Optional[List[float]]:
		"""Running compensated sums of :meth:`binomial_distribution`."""
		distribution = self.binomial_distribution(n, probability)
		if distribution is None:
			return None
		running = 0.0
		cumulative: List[float] = []
		for item in distribution:
			running = kahan_sum([running, item])
			cumulative.append(running)
		return cumulative
