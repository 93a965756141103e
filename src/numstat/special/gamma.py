# src/numstat/special/gamma.py

from __future__ import annotations

import math
from typing import Callable, Optional, Union

from ..config import GammaMethod
from ..engine import EngineBase
from ..errors import ErrorKind
from ..logutil import get_logger
from ..numeric import is_integer, power

LOG = get_logger(__name__)

__all__ = ["GammaMethod", "stirling_gamma", "spouge_gamma", "binomial_ratio_product", "GammaFunctions"]

RECIPROCAL_E = 0.36787944117144232159552377016147
TWO_PI = 6.283185307179586476925286766559
SQRT_TWO_PI = math.sqrt(TWO_PI)
# 170! is the largest factorial below the double range
EXACT_GAMMA_LIMIT = 171


def _as_float(value: int) -> float:
	try:
		return float(value)
	except OverflowError:
		return math.inf


def stirling_gamma(n: float) -> float:
	"""
	Stirling-Nemes approximation of the Gamma function for ``n > 0``.

	:param n: Positive argument.
	:return: Approximate ``Gamma(n)``; ``inf`` past the double range.
	"""
	g = 1.0 / (10.0 * n)
	g = 1.0 / ((12 * n) - g)
	g = (g + n) * RECIPROCAL_E
	g = power(g, n)
	return g * math.sqrt(TWO_PI / n)


def spouge_gamma(n: float, a: int = 40) -> float:
	"""
	Spouge's approximation of the Gamma function for ``n > 0``.

	The scale factor ``(n+a)^(n+1/2) e^(-n-a) / n`` is evaluated in log space
	so that large arguments overflow to ``inf`` instead of raising.

	:param n: Positive argument.
	:param a: Number of series terms (Spouge constant).
	:return: Approximate ``Gamma(n)``.
	"""
	try:
		sc = math.exp((n + 0.5) * math.log(n + a) - n - a) / n
	except OverflowError:
		return math.inf

	total = SQRT_TWO_PI
	f = 1.0
	z = n
	for k in range(1, a):
		z += 1
		ck = power(a - k, k - 0.5) * math.exp(a - k) / f
		total += ck / z
		f *= -k
	return total * sc


def binomial_ratio_product(n: int, k: int) -> float:
	"""``n choose k`` as the product of ``(n + 1 - i) / i`` for ``i = 1..k``."""
	result = 1.0
	for i in range(1, k + 1):
		result *= (n + 1 - i) / i
	return result


class GammaFunctions(EngineBase):
	"""Factorials, the Gamma function and binomial coefficients."""

	def factorial(self, n: float) -> Optional[Union[int, float]]:
		"""
		``n!`` from the engine's factorial cache.

		Non-integer arguments are answered with ``Gamma(n)``, as the library always has.

		:param n: Non-negative number.
		:return: Exact integer for integral ``n``, a float otherwise; ``None`` on invalid input.
		"""
		if self._non_numeric("factorial", n=n):
			return None
		if n < 0:
			return self._fail(ErrorKind.DOMAIN, "factorial", f"factorial is only defined for n >= 0, got {n}.")
		if not is_integer(n):
			return self.gamma(n)
		cached = self.factorials.get(int(n))
		return cached if cached is not None else self.compute_factorial(n)

	def compute_factorial(self, n: float) -> Optional[Union[int, float]]:
		"""
		Compute ``n!`` by sequential multiplication from the largest cached index.

		Every intermediate factorial is added to the cache.
		"""
		if self._non_numeric("compute_factorial", n=n):
			return None
		if n < 0:
			return self._fail(ErrorKind.DOMAIN, "compute_factorial", f"factorial is only defined for n >= 0, got {n}.")
		if not is_integer(n):
			return self.gamma(n)
		n = int(n)
		if n > self.factorials.largest:
			LOG.debug("Extending factorial cache from %d to %d", self.factorials.largest, n)
		return self.factorials.get_or_compute(n)

	def _gamma(self, n: float, operation: str, approximate: Callable[[float], float]) -> Optional[float]:
		if self._non_numeric(operation, n=n):
			return None
		if n < 0:
			return self._fail(ErrorKind.DOMAIN, operation, f"the Gamma function is only defined for n >= 0, got {n}.")
		if n == 0:
			return math.inf
		if is_integer(n) and n <= EXACT_GAMMA_LIMIT:
			return _as_float(self.factorials.get_or_compute(int(n) - 1))
		return approximate(n)

	def gamma_stirling(self, n: float) -> Optional[float]:
		"""Stirling-Nemes approximation; integers up to 171 use the exact ``(n-1)!``."""
		return self._gamma(n, "gamma_stirling", stirling_gamma)

	def gamma_spouge(self, n: float) -> Optional[float]:
		"""Spouge approximation with ``options.spouge_constant`` terms; integers up to 171 use the exact ``(n-1)!``."""
		a = self.options.spouge_constant
		return self._gamma(n, "gamma_spouge", lambda z: spouge_gamma(z, a))

	def gamma(self, n: float, method: Optional[GammaMethod] = None) -> Optional[float]:
		"""
		Gamma function.

		``Gamma(0)`` is ``inf`` and ``Gamma(1) = 1``; negative arguments are refused.

		:param n: Non-negative argument.
		:param method: Approximation for non-integer (or uncached) arguments;
					   defaults to ``options.gamma_method``.
		:return: ``Gamma(n)`` or ``None`` on invalid input.
		"""
		method = self.options.gamma_method if method is None else GammaMethod(method)
		if method is GammaMethod.SPOUGE:
			return self.gamma_spouge(n)
		return self.gamma_stirling(n)

	def binomial_coefficient(self, n: float, k: float) -> Optional[float]:
		"""
		``n choose k`` as a product of ``k`` ratios ``(n + 1 - i) / i``.

		:param n: Integer ``n >= k``.
		:param k: Integer ``k >= 0``.
		:return: The coefficient as float, or ``None`` on invalid input.
		"""
		if self._non_numeric("binomial_coefficient", n=n, k=k):
			return None
		if n < k or k < 0:
			return self._fail(
				ErrorKind.DOMAIN, "binomial_coefficient",
				f"The binomial coefficient is only defined for n and k with n >= k >= 0. N is {n} and k is {k}.",
			)
		if not is_integer(n) or not is_integer(k):
			return self._fail(
				ErrorKind.DOMAIN, "binomial_coefficient",
				"The binomial coefficient is only defined for integers n and k.",
			)
		return binomial_ratio_product(int(n), int(k))
