# src/numstat/engine.py

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import EngineOptions
from .data import (
	PairedValues, Scale, contingency_table, reduce_to_pairs, table_from_counts, two_by_two, validate_input,
)
from .data.scale import ScaleLike
from .errors import Diagnostic, DiagnosticLog, ErrorKind, StatisticsError, exception_for
from .imports import pandas as pd  # type: ignore
from .logutil import get_logger
from .numeric import is_integer, is_numeric
from .special.factorial import FactorialCache

LOG = get_logger(__name__)

__all__ = ["EngineBase"]


class EngineBase:
	"""
	Shared state and reporting hook of every statistics mixin.

	The base keeps the immutable :class:`EngineOptions`, the engine-owned
	:class:`FactorialCache`, the memoized standard normal cumulative table and a
	:class:`DiagnosticLog`. Public routines validate their arguments first; on
	violation they call :meth:`_fail`, which records and logs the diagnostic and
	returns ``None`` (or raises, when ``raise_errors`` is set).

	:param options: Approximation constants; built from ``overrides`` when omitted.
	:param overrides: Option values (``epsilon=...``) applied on top of ``options``.
	"""
	def __init__(self, options: Optional[EngineOptions] = None, **overrides: Any) -> None:
		if options is None:
			options = EngineOptions(**overrides)
		elif overrides:
			options = options.with_changes(**overrides)
		self.options = options
		self.factorials = FactorialCache()
		self.diagnostics = DiagnosticLog()
		self._normal_table: Optional[Dict[str, float]] = None
		self._normal_table_lock = threading.Lock()

	@property
	def epsilon(self) -> float:
		return self.options.epsilon

	# --- Reporting ---
	def _fail(self, kind: ErrorKind, operation: str, message: str) -> None:
		"""
		Report an argument violation.

		:param kind: Violation category.
		:param operation: Name of the refusing routine.
		:param message: Descriptive message.
		:return: ``None``, so callers can ``return self._fail(...)``.
		:raises StatisticsError: Subclass matching ``kind`` when ``raise_errors`` is enabled.
		"""
		diagnostic = Diagnostic(kind, operation, message)
		self.diagnostics.append(diagnostic)
		if not self.options.suppress_warnings:
			LOG.warning("%s", diagnostic)
		if self.options.raise_errors:
			raise exception_for(kind)(message, operation=operation)
		return None

	def _report(self, exc: StatisticsError, operation: str) -> None:
		"""Route a validation exception raised by the data layer through :meth:`_fail`."""
		return self._fail(exc.kind, exc.operation or operation, str(exc))

	# --- Validation helpers ---
	def _non_numeric(self, operation: str, **named: Any) -> bool:
		"""
		Report the first missing or non-numeric keyword argument.

		:return: ``True`` when a violation was reported.
		"""
		for name, value in named.items():
			if value is None:
				self._fail(ErrorKind.MISSING, operation, f"argument '{name}' is required.")
				return True
			if not is_numeric(value):
				self._fail(ErrorKind.TYPE, operation, f"argument '{name}' needs to be numeric, got {value!r}.")
				return True
		return False

	def _values(
			self,
			data: Any,
			operation: str,
			minimum_scale: ScaleLike = Scale.METRIC,
			scale: Optional[ScaleLike] = None,
			*,
			column: Optional[Union[int, str]] = None,
	) -> Optional[List[Any]]:
		"""Validated values of ``data``, or ``None`` after reporting the violation."""
		try:
			return validate_input(data, minimum_scale, scale, column=column, operation=operation)
		except StatisticsError as exc:
			return self._report(exc, operation)

	def _paired(
			self,
			first: Any,
			second: Any,
			operation: str,
			minimum_scale: ScaleLike = Scale.METRIC,
			scale: Optional[ScaleLike] = None,
			*,
			minimum: int = 1,
	) -> Optional[PairedValues]:
		"""
		Validate two variables and keep their complete pairs.

		:param minimum: Smallest number of pairs the routine needs.
		:return: :class:`PairedValues`, or ``None`` after reporting the violation.
		"""
		first_values = self._values(first, operation, minimum_scale, scale)
		if first_values is None:
			return None
		second_values = self._values(second, operation, minimum_scale, scale)
		if second_values is None:
			return None
		pairs = reduce_to_pairs(first_values, second_values)
		if len(pairs) < minimum:
			return self._fail(
				ErrorKind.DOMAIN, operation,
				f"At least {minimum} complete pairs of observations are required, got {len(pairs)}.",
			)
		return pairs

	# --- Contingency tables ---
	def contingency_table(
			self,
			first: Any,
			second: Any,
			*,
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional["pd.DataFrame"]:
		"""
		Cross-tabulate two categorical variables (see :func:`numstat.data.contingency_table`).

		:return: Integer count frame, or ``None`` after reporting the violation.
		"""
		op = "contingency_table"
		try:
			return contingency_table(first, second, first_levels=first_levels, second_levels=second_levels, operation=op)
		except StatisticsError as exc:
			return self._report(exc, op)

	def _table(
			self,
			operation: str,
			data: Tuple[Any, ...],
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional["pd.DataFrame"]:
		"""
		Resolve the table arguments of a contingency test.

		``data`` is either ``(counts,)`` (an r x c count matrix) or ``(first, second)``
		(two categorical variables).
		"""
		try:
			if len(data) == 1:
				return table_from_counts(data[0], operation=operation)
			if len(data) == 2:
				return contingency_table(
					data[0], data[1], first_levels=first_levels, second_levels=second_levels, operation=operation
				)
		except StatisticsError as exc:
			return self._report(exc, operation)
		return self._fail(
			ErrorKind.MISSING, operation,
			f"Supply a table of counts or two variables to analyze, got {len(data)} arguments.",
		)

	def _two_by_two(
			self,
			operation: str,
			data: Tuple[Any, ...],
			first_levels: Optional[Sequence[Any]] = None,
			second_levels: Optional[Sequence[Any]] = None,
	) -> Optional[Tuple[int, int, int, int]]:
		"""
		Resolve ``(a, b, c, d)`` from four cell counts, a 2x2 count matrix or two dichotomous variables.
		"""
		if len(data) == 4:
			if self._non_numeric(operation, a=data[0], b=data[1], c=data[2], d=data[3]):
				return None
			if any(cell < 0 or not is_integer(cell) for cell in data):
				return self._fail(ErrorKind.DOMAIN, operation, f"Cell counts must be non-negative integers, got {data}.")
			a, b, c, d = (int(cell) for cell in data)
			return a, b, c, d
		table = self._table(operation, data, first_levels, second_levels)
		if table is None:
			return None
		try:
			return two_by_two(table, operation=operation)
		except StatisticsError as exc:
			return self._report(exc, operation)

	def __repr__(self) -> str:
		return f"{type(self).__name__}(epsilon={self.options.epsilon}, diagnostics={len(self.diagnostics)})"
