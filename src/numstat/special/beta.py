# src/numstat/special/beta.py

from __future__ import annotations

import math
from typing import Any, Optional

from ..errors import ErrorKind
from ..imports import numpy as np  # type: ignore
from ..numeric import is_integer, power
from .gamma import GammaFunctions, spouge_gamma

__all__ = [
	"log_beta", "fraction_depth", "beta_fraction", "continued_fraction_beta", "regularised_fraction",
	"BetaFunctions",
]


def _beta_fraction_term(r: int, a: float, b: float, x: Any) -> Any:
	if r % 2 == 0:
		k = 0.5 * r
		return k * (b - k) * x / ((a + 2 * k - 1) * (a + 2 * k))
	k = 0.5 * r - 0.5
	return -(a + k) * (a + b + k) * x / ((a + 2 * k) * (a + 2 * k + 1))


def log_beta(a: float, b: float) -> float:
	"""``log B(a, b)`` from :func:`math.lgamma`; finite for any positive shapes."""
	return math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)


def fraction_depth(iterations: int, a: float, b: float) -> int:
	"""
	Number of fraction levels for shapes ``a``, ``b``.

	The fraction needs on the order of ``sqrt(max(a, b))`` levels, so the
	configured depth is raised for large shapes.
	"""
	return max(iterations, 20 * int(math.sqrt(max(a, b))) + 60)


def beta_fraction(x: Any, a: float, b: float, iterations: int = 40) -> Any:
	"""
	Backward recurrence of the incomplete beta continued fraction.

	Works element-wise when ``x`` is an array.
	"""
	fraction = 1.0
	for r in range(iterations, 0, -1):
		fraction = 1 + _beta_fraction_term(r, a, b, x) / fraction
	return fraction


def continued_fraction_beta(x: float, a: float, b: float, iterations: int = 40) -> float:
	"""
	Lower incomplete beta ``B(x; a, b)`` by backward recurrence of its continued fraction.

	:param x: Upper integration limit in ``[0, 1)``.
	:param a: Shape ``a > 0``.
	:param b: Shape ``b > 0``.
	:param iterations: Number of fraction levels.
	:return: ``B(x; a, b)``.
	"""
	factor = power(x, a) * power(1 - x, b) / a
	return factor / beta_fraction(x, a, b, iterations)


def regularised_fraction(x: Any, a: float, b: float, iterations: int = 40) -> Any:
	"""
	``I_x(a, b)`` from the continued fraction, without mirroring.

	The prefactor ``x^a (1-x)^b / (a B(a, b))`` is formed in log space, so large
	shapes underflow to ``0`` instead of dividing by a vanished ``B(a, b)``.
	Accepts scalars and arrays; ``x == 0`` gives ``0``.

	:param x: Argument(s) in ``[0, 1)``, below ``(a+1)/(a+b+2)`` for fast convergence.
	:param a: Shape ``a > 0``.
	:param b: Shape ``b > 0``.
	:param iterations: Number of fraction levels.
	"""
	with np.errstate(divide="ignore", invalid="ignore"):
		log_prefix = a * np.log(x) + b * np.log1p(-np.asarray(x)) - math.log(a) - log_beta(a, b)
		return np.exp(log_prefix) / beta_fraction(x, a, b, iterations)


class BetaFunctions(GammaFunctions):
	"""Beta, incomplete beta and regularised incomplete beta."""

	def _shape_violation(self, operation: str, a: float, b: float) -> bool:
		if a <= 0 or b <= 0:
			self._fail(ErrorKind.DOMAIN, operation, f"defined for a and b with a > 0 and b > 0, got a={a}, b={b}.")
			return True
		return False

	def _unit_violation(self, operation: str, x: float) -> bool:
		if x < 0 or x > 1:
			self._fail(ErrorKind.DOMAIN, operation, f"defined for 0 <= x <= 1, got x={x}.")
			return True
		return False

	def beta(self, a: float, b: float) -> Optional[float]:
		"""
		Beta function ``B(a, b)``.

		Positive integers use exact factorials, other shapes the Spouge ratio
		``Gamma(a) Gamma(b) / Gamma(a + b)``.

		:param a: Shape ``a > 0``.
		:param b: Shape ``b > 0``.
		:return: ``B(a, b)`` or ``None`` on invalid input.
		"""
		if self._non_numeric("beta", a=a, b=b) or self._shape_violation("beta", a, b):
			return None
		if is_integer(a) and is_integer(b):
			a, b = int(a), int(b)
			fact = self.factorials.get_or_compute
			return fact(a - 1) * fact(b - 1) / fact(a + b - 1)

		spouge = self.options.spouge_constant
		ga, gb, gab = spouge_gamma(a, spouge), spouge_gamma(b, spouge), spouge_gamma(a + b, spouge)
		if math.isinf(gab):
			# past the double range
			return math.exp(math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b))
		return ga * gb / gab

	def incomplete_beta(self, x: float, a: float, b: float) -> Optional[float]:
		"""
		Lower incomplete beta function ``B(x; a, b)``.

		Evaluated by ``options.incomplete_beta_iterations`` levels of the
		continued fraction; ``x == 1`` returns the complete beta.

		:param x: Upper limit in ``[0, 1]``.
		:param a: Shape ``a > 0``.
		:param b: Shape ``b > 0``.
		:return: ``B(x; a, b)`` or ``None`` on invalid input.
		"""
		op = "incomplete_beta"
		if self._non_numeric(op, x=x, a=a, b=b) or self._unit_violation(op, x) or self._shape_violation(op, a, b):
			return None
		if x == 1:
			return self.beta(a, b)
		return continued_fraction_beta(x, a, b, fraction_depth(self.options.incomplete_beta_iterations, a, b))

	def regularised_beta(self, x: float, a: float, b: float) -> Optional[float]:
		"""
		Regularised incomplete beta ``I_x(a, b) = B(x; a, b) / B(a, b)``.

		Integer shapes sum the negative binomial tail
		``(1-x)^b * sum_{j>=a} C(b+j-1, j) x^j`` until a term past the peak falls
		below ``epsilon``. Other shapes use the continued fraction with a log-space
		prefactor and a depth that grows with the shapes, on the
		mirrored argument ``1 - I_{1-x}(b, a)`` when ``x > (a+1)/(a+b+2)``.

		:param x: Argument in ``[0, 1]``.
		:param a: Shape ``a > 0``.
		:param b: Shape ``b > 0``.
		:return: Probability in ``[0, 1]`` or ``None`` on invalid input.
		"""
		op = "regularised_beta"
		if self._non_numeric(op, x=x, a=a, b=b) or self._unit_violation(op, x) or self._shape_violation(op, a, b):
			return None
		if x == 0:
			return 0.0
		if x == 1:
			return 1.0

		if is_integer(a) and is_integer(b):
			if x > 0.5:
				return 1.0 - self._integer_beta_series(1 - x, int(b), int(a))
			return self._integer_beta_series(x, int(a), int(b))

		depth = fraction_depth(self.options.incomplete_beta_iterations, a, b)
		if x > (a + 1) / (a + b + 2):
			value = 1.0 - float(regularised_fraction(1 - x, b, a, depth))
		else:
			value = float(regularised_fraction(x, a, b, depth))
		return min(1.0, max(0.0, value))

	def _integer_beta_series(self, x: float, a: int, b: int) -> float:
		# log of C(b+j-1, j) x^j, advanced by the ratio (b+j) x / (j+1)
		log_eps = math.log(self.epsilon)
		log_x = math.log(x)
		log_scale = b * math.log1p(-x)
		log_term = math.lgamma(b + a) - math.lgamma(a + 1) - math.lgamma(b) + a * log_x

		total = 0.0
		j = a
		while True:
			total += math.exp(log_term + log_scale)
			ratio = (b + j) * x / (j + 1)
			if log_term < log_eps and ratio < 1:
				break
			log_term += math.log(ratio)
			j += 1
		return min(1.0, total)
