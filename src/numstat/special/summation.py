# src/numstat/special/summation.py

from __future__ import annotations

from typing import Any, Iterable, Optional

from ..data import as_list
from ..engine import EngineBase
from ..errors import StatisticsError
from ..numeric import is_numeric

__all__ = ["kahan_sum", "plain_sum", "Summation"]


def kahan_sum(values: Iterable[Any]) -> Optional[float]:
	"""
	Compensated (Kahan) summation.

	Non-numeric entries, ``NaN`` and infinities count as zero.

	:param values: Addends.
	:return: The sum, or ``None`` for an empty input.
	"""
	total = 0.0
	compensation = 0.0
	seen = False
	for value in values:
		seen = True
		addend = value if is_numeric(value) else 0.0
		y = addend - compensation
		t = total + y
		compensation = (t - total) - y
		total = t
	return total if seen else None


def plain_sum(values: Iterable[Any]) -> Optional[float]:
	"""Uncompensated sum with the same input policy as :func:`kahan_sum`."""
	total = 0.0
	seen = False
	for value in values:
		seen = True
		if is_numeric(value):
			total += value
	return total if seen else None


class Summation(EngineBase):
	"""Summation routines with argument reporting."""

	def sum_exact(self, values: Any) -> Optional[float]:
		"""
		Sum ``values`` with compensation for floating-point rounding drift.

		:param values: Sequence, ndarray or Series; non-numeric entries count as ``0``.
		:return: The sum; ``None`` for empty input (no diagnostic) or missing input.
		"""
		try:
			items = as_list(values, operation="sum_exact")
		except StatisticsError as exc:
			return self._report(exc, "sum_exact")
		return kahan_sum(items)

	def sum(self, values: Any) -> Optional[float]:
		"""Plain sum; same policies as :meth:`sum_exact`."""
		try:
			items = as_list(values, operation="sum")
		except StatisticsError as exc:
			return self._report(exc, "sum")
		return plain_sum(items)

	def product(self, values: Any) -> Optional[float]:
		"""
		Product of the numeric entries; the empty product is ``1``.

		Non-numeric entries, ``NaN`` and infinities are skipped.
		"""
		try:
			items = as_list(values, operation="product")
		except StatisticsError as exc:
			return self._report(exc, "product")
		result = 1.0
		for value in items:
			if is_numeric(value):
				result *= value
		return result
