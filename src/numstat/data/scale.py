# src/numstat/data/scale.py

from __future__ import annotations

from enum import IntEnum
from typing import Union

__all__ = ["Scale", "ScaleLike"]


class Scale(IntEnum):
	"""Scale of measurement, ordered by level of sophistication."""
	NOMINAL = 0
	ORDINAL = 1
	INTERVAL = 2
	METRIC = 3

	@classmethod
	def parse(cls, value: "ScaleLike") -> "Scale":
		"""
		Resolve a scale from its enum member, name (case-insensitive) or level.

		:raises ValueError: For unknown names or levels.
		"""
		if isinstance(value, cls):
			return value
		if isinstance(value, str):
			try:
				return cls[value.strip().upper()]
			except KeyError:
				valid = ", ".join(m.name.lower() for m in cls)
				raise ValueError(f"'{value}' is not a valid scale of measurement. Valid scales include: {valid}") from None
		return cls(int(value))

	def at_least(self, minimum: "ScaleLike") -> bool:
		return self >= Scale.parse(minimum)


ScaleLike = Union[Scale, str, int]
