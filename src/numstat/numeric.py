# src/numstat/numeric.py

from __future__ import annotations

import math
import numbers
from typing import Any

__all__ = ["is_numeric", "is_integer", "normal_round", "power", "table_key"]


def is_numeric(value: Any) -> bool:
	"""
	Return ``True`` for finite real numbers.

	Booleans, ``NaN`` and infinities are not numeric in the engine's sense:
	they are skipped by the summation routines and refused by the special functions.

	:param value: Any object.
	:return: Whether the value may enter an algebraic routine.
	"""
	if isinstance(value, bool) or not isinstance(value, numbers.Real):
		return False
	return math.isfinite(value)


def is_integer(value: Any) -> bool:
	"""``True`` for numeric values without a fractional part (``3`` and ``3.0`` alike)."""
	if not is_numeric(value):
		return False
	if isinstance(value, numbers.Integral):
		return True
	return float(value).is_integer()


def normal_round(value: float, decimals: int = 0) -> float:
	"""
	Round to ``decimals`` places treating negative and positive values symmetrically.

	The helper implements the classic "round half-up" rule on the absolute
	value and reapplies the original sign, so ``±1.25`` both round to ``±1.3``.
	Unlike :func:`round`, ties never fall toward the even neighbour.

	:param value: Real number to round.
	:param decimals: Number of decimal places to keep (must be ``>=0``).
	:return: Rounded float.
	:raises TypeError: If ``value`` is not a real number.
	:raises ValueError: If ``decimals`` is not a non-negative integer.
	"""
	if isinstance(value, bool) or not isinstance(value, numbers.Real):
		raise TypeError(f"value must be a real number, got {type(value)}")
	if not isinstance(decimals, int) or decimals < 0:
		raise ValueError(f"decimals must be a non-negative integer, got {decimals}")
	if not math.isfinite(value):
		return float(value)

	factor = 10 ** decimals
	rounded = math.floor(abs(value) * factor + 0.5)
	return math.copysign(rounded / factor, value)


def power(base: float, exponent: float) -> float:
	"""
	``base ** exponent`` returning ``inf`` instead of raising on overflow.

	Binomial weights and Stirling's product can exceed the double range for
	large counts; the overflow is carried as an infinity so that a later
	ratio resolves to ``0`` or ``inf`` rather than aborting the computation.
	"""
	try:
		result = math.pow(base, exponent)
	except OverflowError:
		if base < 0 and float(exponent).is_integer() and int(exponent) % 2:
			return -math.inf
		return math.inf
	return result


def table_key(x: float) -> str:
	"""Two-decimal key of a distribution table; ``-0.00`` collapses to ``"0.00"``."""
	key = f"{x:.2f}"
	if key == "-0.00":
		return "0.00"
	return key
