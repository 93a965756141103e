# src/numstat/config/options.py

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping

from ..errors import ConfigError
from .schema import validate_options

__all__ = ["GammaMethod", "EngineOptions"]


class GammaMethod(str, Enum):
	"""Approximation used for the Gamma function of non-integer arguments."""
	STIRLING = "stirling"
	SPOUGE = "spouge"


@dataclass(frozen=True)
class EngineOptions:
	"""
	Approximation constants of an engine instance.

	Instances are immutable; use :meth:`with_changes` to derive a variant.

	:param epsilon: Convergence/tail threshold of series and table enumeration.
	:param incomplete_beta_iterations: Backward recurrence depth of the incomplete beta fraction.
	:param incomplete_gamma_iterations: Depth of the incomplete gamma fraction and series.
	:param max_barnards_n: Largest table total Barnard's test accepts.
	:param spouge_constant: Number of terms ``a`` of Spouge's approximation.
	:param z_table_iterations: Terms of the standard normal cumulative series.
	:param suppress_warnings: Do not log diagnostics (they are still recorded).
	:param raise_errors: Raise :class:`~numstat.errors.StatisticsError` instead of returning ``None``.
	:param gamma_method: Default approximation of :meth:`gamma`.
	"""
	epsilon: float = 0.00001
	incomplete_beta_iterations: int = 40
	incomplete_gamma_iterations: int = 80
	max_barnards_n: int = 200
	spouge_constant: int = 40
	z_table_iterations: int = 25
	suppress_warnings: bool = False
	raise_errors: bool = False
	gamma_method: GammaMethod = GammaMethod.STIRLING

	def __post_init__(self) -> None:
		if not isinstance(self.gamma_method, GammaMethod):
			try:
				method = GammaMethod(str(self.gamma_method).lower())
			except ValueError as exc:
				raise ConfigError(f"option 'gamma_method' failed validation: {exc}") from exc
			object.__setattr__(self, "gamma_method", method)
		validate_options(self.to_dict())

	@classmethod
	def from_mapping(cls, values: Mapping[str, Any]) -> "EngineOptions":
		"""
		Build options from a loose mapping (e.g., a parsed config section).

		:param values: ``option -> value``; keys are case-insensitive.
		:return: Validated options.
		:raises ConfigError: On unknown keys, wrong types or out-of-range values.
		"""
		return cls(**validate_options(values))

	def with_changes(self, **changes: Any) -> "EngineOptions":
		return replace(self, **changes)

	def to_dict(self) -> Dict[str, Any]:
		data = asdict(self)
		data["gamma_method"] = self.gamma_method.value
		return data
