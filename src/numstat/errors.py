# src/numstat/errors.py

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Type

__all__ = [
	"ErrorKind", "Diagnostic", "DiagnosticLog",
	"StatisticsError", "MissingArgumentError", "DomainViolationError", "TypeViolationError",
	"ConfigError", "exception_for",
]


class ErrorKind(str, Enum):
	"""Category of an argument violation reported by the engine."""
	MISSING = "missing"
	DOMAIN = "domain"
	TYPE = "type"


class StatisticsError(ValueError):
	"""Base class of all argument errors raised when ``raise_errors`` is enabled."""
	kind = ErrorKind.DOMAIN

	def __init__(self, message: str, *, operation: str = "") -> None:
		super().__init__(message)
		self.operation = operation


class MissingArgumentError(StatisticsError):
	"""A required value was not supplied."""
	kind = ErrorKind.MISSING


class DomainViolationError(StatisticsError):
	"""A value lies outside the mathematical domain of the routine."""
	kind = ErrorKind.DOMAIN


class TypeViolationError(StatisticsError):
	"""A value is not numeric where numeric input is required."""
	kind = ErrorKind.TYPE


class ConfigError(Exception):
	"""Invalid engine options or unreadable option files."""


_EXCEPTIONS: Dict[ErrorKind, Type[StatisticsError]] = {
	ErrorKind.MISSING: MissingArgumentError,
	ErrorKind.DOMAIN: DomainViolationError,
	ErrorKind.TYPE: TypeViolationError,
}


def exception_for(kind: ErrorKind) -> Type[StatisticsError]:
	"""Return the exception class matching an :class:`ErrorKind`."""
	return _EXCEPTIONS[kind]


@dataclass(frozen=True)
class Diagnostic:
	"""
	One reported violation.

	:param kind: Violation category.
	:param operation: Human name of the routine that refused its input.
	:param message: Descriptive message.
	"""
	kind: ErrorKind
	operation: str
	message: str

	def __str__(self) -> str:
		return f"{self.operation}: {self.message}" if self.operation else self.message


class DiagnosticLog:
	"""
	Bounded, thread-safe record of the diagnostics an engine has emitted.

	Callers test results for ``None`` and consult :attr:`last` to tell a failed
	computation from absent data.
	"""

	def __init__(self, maxlen: int = 256) -> None:
		self._items: List[Diagnostic] = []
		self._maxlen = maxlen
		self._lock = threading.Lock()

	def append(self, diagnostic: Diagnostic) -> None:
		with self._lock:
			self._items.append(diagnostic)
			if len(self._items) > self._maxlen:
				del self._items[0]

	@property
	def last(self) -> Optional[Diagnostic]:
		with self._lock:
			return self._items[-1] if self._items else None

	def clear(self) -> None:
		with self._lock:
			self._items.clear()

	def __len__(self) -> int:
		return len(self._items)

	def __iter__(self) -> Iterator[Diagnostic]:
		with self._lock:
			return iter(list(self._items))

	def __repr__(self) -> str:
		return f"DiagnosticLog(count={len(self._items)})"
