# src/numstat/data/coerce.py
from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from ..errors import DomainViolationError, MissingArgumentError, TypeViolationError
from ..imports import numpy as np  # type: ignore
from ..imports import pandas as pd  # type: ignore
from ..logutil import get_logger
from ..numeric import is_numeric
from .scale import Scale, ScaleLike

LOG = get_logger(__name__)

__all__ = [
	"DataLike",
	"PairedValues",
	"as_list",
	"is_missing",
	"drop_missing",
	"validate_input",
	"reduce_to_pairs",
]

DataLike = Union[Sequence[Any], "np.ndarray", "pd.Series", "pd.DataFrame"]  # type: ignore[name-defined]


# --- Core Conversion Helpers ---
def _is_pandas_df(obj: Any) -> bool:
	return pd.available and isinstance(obj, pd.DataFrame)  # type: ignore[attr-defined]


def _is_pandas_series(obj: Any) -> bool:
	return pd.available and isinstance(obj, pd.Series)  # type: ignore[attr-defined]


def _is_nd_array(obj: Any) -> bool:
	return np.available and isinstance(obj, np.ndarray)  # type: ignore[attr-defined]


def _from_dataframe(df: "pd.DataFrame", column: Optional[Union[int, str]], operation: str) -> List[Any]:
	if df.shape[1] == 1 and column is None:
		return df.iloc[:, 0].tolist()
	if column is None:
		raise DomainViolationError(
			f"DataFrame has {df.shape[1]} columns; please specify `column` (name or 0-based index).",
			operation=operation,
		)
	try:
		col = df.iloc[:, column] if isinstance(column, int) else df[column]
	except (KeyError, IndexError) as exc:
		LOG.debug("Failed to select column %r: %s", column, exc)
		raise DomainViolationError(f"There is no variable {column!r} defined.", operation=operation) from exc
	return col.tolist()


def as_list(data: Any, *, column: Optional[Union[int, str]] = None, operation: str = "") -> List[Any]:
	"""
	Convert various data containers to a plain list of Python objects.

	Accepts: list/tuple, 1-D ndarray, Series and a DataFrame column. numpy scalars
	become Python numbers; missing markers (``None``/``NaN``) are preserved.

	:param data: Input data.
	:param column: Column selector when ``data`` is a DataFrame. If ``None`` and
				   the frame has exactly one column, that column is used.
	:param operation: Routine name used in error messages.
	:return: List of values in input order.
	:raises MissingArgumentError: When ``data`` is ``None``.
	:raises DomainViolationError: For multi-dimensional arrays or unknown columns.
	:raises TypeViolationError: For unsupported container types.
	"""
	if data is None:
		raise MissingArgumentError("No data was supplied.", operation=operation)

	if _is_pandas_series(data):
		return data.tolist()

	if _is_pandas_df(data):
		return _from_dataframe(data, column, operation)

	if _is_nd_array(data):
		if data.ndim != 1:
			raise DomainViolationError(f"Expected 1D array-like; got ndim={data.ndim}", operation=operation)
		return data.tolist()

	if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
		return list(data)

	raise TypeViolationError(
		f"No properly formatted data was supplied, got {type(data).__name__}. Supply a sequence of values.",
		operation=operation,
	)


def is_missing(value: Any) -> bool:
	"""``None`` and ``NaN`` mark missing observations."""
	if value is None:
		return True
	if isinstance(value, numbers.Real) and not isinstance(value, bool):
		return math.isnan(value)
	return False


def drop_missing(values: Sequence[Any]) -> Tuple[List[Any], int]:
	"""Return the non-missing values and the number of dropped entries."""
	kept = [v for v in values if not is_missing(v)]
	return kept, len(values) - len(kept)


def validate_input(
		data: Any,
		minimum_scale: ScaleLike = Scale.METRIC,
		declared_scale: Optional[ScaleLike] = None,
		*,
		column: Optional[Union[int, str]] = None,
		operation: str = "",
) -> List[Any]:
	"""
	Coerce ``data`` and check it against the minimum scale of a routine.

	Undeclared data is assumed to satisfy ``minimum_scale``. Above the nominal
	scale, every non-missing entry has to be a finite number.

	:param data: Input data (see :func:`as_list`).
	:param minimum_scale: Lowest scale the routine is defined for.
	:param declared_scale: Scale the caller declares for the data.
	:param column: DataFrame column selector.
	:param operation: Routine name used in error messages.
	:return: The values as a list (missing markers preserved).
	:raises StatisticsError: On empty data, a scale below the minimum or non-numeric entries.
	"""
	minimum = Scale.parse(minimum_scale)
	try:
		scale = minimum if declared_scale is None else Scale.parse(declared_scale)
	except ValueError as exc:
		raise DomainViolationError(str(exc), operation=operation) from exc

	values = as_list(data, column=column, operation=operation)
	if not values:
		raise DomainViolationError("The supplied data contains no values.", operation=operation)

	if not scale.at_least(minimum):
		allowed = ", ".join(s.name.lower() for s in Scale if s >= minimum)
		raise DomainViolationError(
			f"{operation or 'This statistical method'} is only defined for these scales of measurement: "
			f"{allowed}. The scale of the supplied data is {scale.name.lower()}.",
			operation=operation,
		)

	if minimum > Scale.NOMINAL:
		for index, value in enumerate(values):
			if not is_missing(value) and not is_numeric(value):
				raise TypeViolationError(
					f"The supplied data contains non-numeric values: {value!r} at index {index}",
					operation=operation,
				)
	return values


@dataclass(frozen=True)
class PairedValues:
	"""Complete observation pairs of two variables."""
	first: List[float]
	second: List[float]
	missings: int

	def __len__(self) -> int:
		return len(self.first)


def reduce_to_pairs(first: Sequence[Any], second: Sequence[Any]) -> PairedValues:
	"""
	Keep the index positions where both variables hold a numeric value.

	Sequences of unequal length are compared up to the longer one; positions
	beyond the shorter sequence count as missing.

	:param first: Values of the first variable.
	:param second: Values of the second variable.
	:return: The retained pairs and the number of dropped positions.
	"""
	length = max(len(first), len(second))
	kept_first: List[float] = []
	kept_second: List[float] = []
	for i in range(length):
		a = first[i] if i < len(first) else None
		b = second[i] if i < len(second) else None
		if is_numeric(a) and is_numeric(b):
			kept_first.append(a)
			kept_second.append(b)
	return PairedValues(kept_first, kept_second, length - len(kept_first))
