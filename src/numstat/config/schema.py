# src/numstat/config/schema.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..errors import ConfigError

Validator = Callable[[Any], None]

__all__ = [
	"KeySpec",
	"Validator",
	"make_choices_validator",
	"make_range_validator",
	"OPTION_SPECS",
	"validate_options",
]


@dataclass
class KeySpec:
	"""
	Specification for an option key used during validation.

	:param expected_type: Allowed type (or tuple of types) for the key's value.
	:param required: Whether the key must be present.
	:param validator: Optional callable that receives the *parsed* value and
					  must raise on invalid content.
	"""
	expected_type: Union[type, Tuple[type, ...]]
	required: bool = False
	validator: Optional[Validator] = None

	def __post_init__(self) -> None:
		if self.validator is not None and not callable(self.validator):
			raise TypeError("KeySpec.validator must be callable or None")


def make_choices_validator(choices: Iterable[Any]) -> Validator:
	"""
	Build a validator that ensures the value is one of the allowed *choices*.

	Strings are compared case-insensitively.

	:param choices: Iterable of allowed values.
	:return: A callable that raises ``ValueError`` if the value is not allowed.
	"""
	allowed = {c.lower() if isinstance(c, str) else c for c in choices}

	def _validator(value: Any) -> None:
		candidate = value.lower() if isinstance(value, str) else value
		if candidate not in allowed:
			raise ValueError(f"value {value!r} not in allowed set {sorted(map(str, allowed))!r}")

	return _validator


def make_range_validator(*, minimum: Optional[float] = None, maximum: Optional[float] = None,
                         exclusive_minimum: bool = False) -> Validator:
	"""
	Build a validator for numeric bounds.

	:param minimum: Lower bound (inclusive unless ``exclusive_minimum``).
	:param maximum: Inclusive upper bound.
	:param exclusive_minimum: Reject values equal to ``minimum``.
	:return: Validator raising ``ValueError`` outside the bounds.
	"""
	def _validator(value: Any) -> None:
		if minimum is not None:
			if exclusive_minimum and value <= minimum:
				raise ValueError(f"value {value!r} must be > {minimum}")
			if not exclusive_minimum and value < minimum:
				raise ValueError(f"value {value!r} must be >= {minimum}")
		if maximum is not None and value > maximum:
			raise ValueError(f"value {value!r} must be <= {maximum}")

	return _validator


OPTION_SPECS: Dict[str, KeySpec] = {
	"epsilon": KeySpec((float, int), validator=make_range_validator(minimum=0, maximum=0.5, exclusive_minimum=True)),
	"incomplete_beta_iterations": KeySpec(int, validator=make_range_validator(minimum=1)),
	"incomplete_gamma_iterations": KeySpec(int, validator=make_range_validator(minimum=1)),
	"max_barnards_n": KeySpec(int, validator=make_range_validator(minimum=1)),
	"spouge_constant": KeySpec(int, validator=make_range_validator(minimum=2)),
	"z_table_iterations": KeySpec(int, validator=make_range_validator(minimum=1)),
	"suppress_warnings": KeySpec(bool),
	"raise_errors": KeySpec(bool),
	"gamma_method": KeySpec(str, validator=make_choices_validator(["stirling", "spouge"])),
}


def validate_options(values: Mapping[str, Any],
                     specs: Optional[Mapping[str, KeySpec]] = None) -> Dict[str, Any]:
	"""
	Validate presence, types and bounds of an option mapping.

	Keys are matched case-insensitively; unknown keys are reported as errors.
	``bool`` never satisfies a numeric key even though it subclasses ``int``.
	All problems are aggregated and raised together.

	:param values: Parsed option values (``key -> value``).
	:param specs: Key specifications; defaults to :data:`OPTION_SPECS`.
	:return: The validated mapping with lowercased keys.
	:raises ConfigError: When any validation error occurs.
	"""
	specs = OPTION_SPECS if specs is None else specs
	errors: List[str] = []
	out: Dict[str, Any] = {}

	for raw_key, value in values.items():
		key = str(raw_key).lower()
		spec = specs.get(key)
		if spec is None:
			errors.append(f"unknown option '{key}'")
			continue

		expected = spec.expected_type if isinstance(spec.expected_type, tuple) else (spec.expected_type,)
		if isinstance(value, bool) and bool not in expected:
			errors.append(f"option '{key}' expected {expected}, got bool ({value!r})")
			continue
		if not isinstance(value, expected):
			errors.append(f"option '{key}' expected {expected}, got {type(value)} ({value!r})")
			continue

		if spec.validator is not None:
			try:
				spec.validator(value)
			except ValueError as exc:
				errors.append(f"option '{key}' failed validation: {exc}")
				continue
		out[key] = value

	for key, spec in specs.items():
		if spec.required and key not in out:
			errors.append(f"missing required option '{key}'")

	if errors:
		raise ConfigError("\n".join(errors))
	return out
