# src/numstat/special/factorial.py

from __future__ import annotations

import threading
from typing import Iterator, List, Optional

__all__ = ["FactorialCache", "SEED_FACTORIALS"]

# 0! .. 21!
SEED_FACTORIALS = (
	1, 1, 2, 6, 24, 120, 720, 5040, 40320, 362880, 3628800, 39916800,
	479001600, 6227020800, 87178291200, 1307674368000, 20922789888000,
	355687428096000, 6402373705728000, 121645100408832000,
	2432902008176640000, 51090942171709440000,
)


class FactorialCache:
	"""
	Append-only table ``n -> n!`` of exact integers.

	Seeded with ``0! .. 21!`` and extended on demand by sequential
	multiplication from the largest cached index; every intermediate value is
	kept. Entries are never replaced, so reads need no lock.
	"""

	def __init__(self) -> None:
		self._values: List[int] = list(SEED_FACTORIALS)
		self._lock = threading.Lock()

	@property
	def largest(self) -> int:
		"""Largest ``n`` whose factorial is cached."""
		return len(self._values) - 1

	def get(self, n: int) -> Optional[int]:
		"""Cached ``n!`` or ``None`` without computing anything."""
		if 0 <= n < len(self._values):
			return self._values[n]
		return None

	def get_or_compute(self, n: int) -> int:
		"""
		Return ``n!``, extending the table up to ``n`` when needed.

		:param n: Non-negative integer.
		:return: Exact factorial.
		:raises ValueError: For negative ``n``.
		"""
		if n < 0:
			raise ValueError(f"factorial is undefined for negative n, got {n}")
		if n < len(self._values):
			return self._values[n]
		with self._lock:
			i = len(self._values)
			value = self._values[-1]
			while i <= n:
				value *= i
				self._values.append(value)
				i += 1
			return self._values[n]

	def __contains__(self, n: object) -> bool:
		return isinstance(n, int) and 0 <= n < len(self._values)

	def __len__(self) -> int:
		return len(self._values)

	def __iter__(self) -> Iterator[int]:
		return iter(list(self._values))

	def __repr__(self) -> str:
		return f"FactorialCache(largest={self.largest})"
