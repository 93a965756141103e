# src/numstat/data/contingency.py
from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from ..errors import DomainViolationError
from ..imports import pandas as pd  # type: ignore
from ..logutil import get_logger
from .coerce import as_list, is_missing

LOG = get_logger(__name__)

__all__ = ["contingency_table", "table_from_counts", "two_by_two"]


def contingency_table(
		first: Any,
		second: Any,
		*,
		first_levels: Optional[Sequence[Any]] = None,
		second_levels: Optional[Sequence[Any]] = None,
		operation: str = "contingency table",
) -> "pd.DataFrame":
	"""
	Cross-tabulate two categorical variables.

	Rows follow ``first_levels`` (or the order of first appearance), columns follow
	``second_levels``. Pairs with a missing member are dropped; absent
	combinations are counted as ``0``.

	:param first: Row variable.
	:param second: Column variable.
	:param first_levels: Explicit row order (value map of the first variable).
	:param second_levels: Explicit column order.
	:param operation: Routine name used in error messages.
	:return: Integer count frame.
	:raises DomainViolationError: When no complete pair remains.
	"""
	rows = as_list(first, operation=operation)
	cols = as_list(second, operation=operation)
	if len(rows) != len(cols):
		raise DomainViolationError(
			f"Both variables need the same number of observations, got {len(rows)} and {len(cols)}.",
			operation=operation,
		)
	pairs = [(r, c) for r, c in zip(rows, cols) if not is_missing(r) and not is_missing(c)]
	if not pairs:
		raise DomainViolationError("Contingency table: There are no valid values.", operation=operation)

	row_values = pd.Series([p[0] for p in pairs], name="first")
	col_values = pd.Series([p[1] for p in pairs], name="second")
	table = pd.crosstab(row_values, col_values)

	row_order = list(first_levels) if first_levels is not None else list(dict.fromkeys(row_values))
	col_order = list(second_levels) if second_levels is not None else list(dict.fromkeys(col_values))
	table = table.reindex(index=row_order, columns=col_order, fill_value=0)
	LOG.debug("%s: %d x %d table over %d pairs", operation, table.shape[0], table.shape[1], len(pairs))
	return table.astype(int)


def table_from_counts(counts: Any, *, operation: str = "contingency table") -> "pd.DataFrame":
	"""
	Wrap an already tabulated r x c count matrix (nested lists, ndarray or frame).

	:raises DomainViolationError: On ragged, negative or non-integral counts.
	"""
	if isinstance(counts, pd.DataFrame):
		frame = counts
	else:
		try:
			frame = pd.DataFrame([list(row) for row in counts])
		except (TypeError, ValueError) as exc:
			raise DomainViolationError(f"Counts must form an r x c matrix: {exc}", operation=operation) from exc
	if frame.isna().to_numpy().any():
		raise DomainViolationError("Counts must form a complete r x c matrix.", operation=operation)
	values = frame.to_numpy()
	if values.dtype.kind not in "iuf" or (values < 0).any() or (values != values.round()).any():
		raise DomainViolationError("Counts must be non-negative integers.", operation=operation)
	return frame.astype(int)


def two_by_two(table: "pd.DataFrame", *, operation: str = "") -> Tuple[int, int, int, int]:
	"""
	Return ``(a, b, c, d)`` of a 2x2 table read row-wise.

	A single observed level on either axis is padded with a zero row/column.

	:raises DomainViolationError: When an axis holds more than two levels.
	"""
	rows, cols = table.shape
	if rows > 2 or cols > 2:
		raise DomainViolationError(
			f"A 2x2 contingency table is required, got {rows}x{cols}.", operation=operation
		)
	values = table.to_numpy().tolist()
	values = [list(row) + [0] * (2 - cols) for row in values] + [[0, 0]] * (2 - rows)
	(a, b), (c, d) = values
	return int(a), int(b), int(c), int(d)
