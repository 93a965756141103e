# src/numstat/config/loader.py

from __future__ import annotations

import ast
import configparser
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

from ..errors import ConfigError
from ..logutil import get_logger
from .options import EngineOptions

LOG = get_logger(__name__)

PathLike = Union[str, Path]

DEFAULT_SECTION = "numstat"

__all__ = ["parse_value", "read_ini_section", "read_json_section", "load_options"]


def parse_value(raw: str) -> Any:
	"""
	Parse a raw INI string into a typed Python value.

	The parser attempts, in order:
	  1) ``ast.literal_eval`` for safe Python literals (numbers, strings, booleans).
	  2) Booleans: ``true/yes/on`` → ``True``, ``false/no/off`` → ``False``.
	  3) Numeric fallback (int/float, scientific notation included).
	  4) Otherwise the stripped string.

	:param raw: Source text as read from ConfigParser.
	:return: Best-effort typed value.
	"""
	s = raw.strip()

	try:
		return ast.literal_eval(s)
	except (ValueError, SyntaxError):
		pass

	lower = s.lower()
	if lower in {"true", "yes", "on"}:
		return True
	if lower in {"false", "no", "off"}:
		return False

	try:
		if any(ch in lower for ch in ".e"):
			return float(s)
		return int(s)
	except ValueError:
		return s


def read_ini_section(files: Iterable[PathLike], section: str = DEFAULT_SECTION) -> Dict[str, Any]:
	"""
	Read one section from one or more INI files; later files override earlier ones.

	:param files: INI paths.
	:param section: Section holding the engine options (case-insensitive).
	:return: ``key -> typed value`` (empty when the section is absent).
	:raises ConfigError: On missing files or parse errors.
	"""
	paths = [Path(p) for p in files]
	missing = [str(p) for p in paths if not p.exists()]
	if missing:
		raise ConfigError(f"Missing config file(s): {', '.join(missing)}")

	cp = configparser.ConfigParser(interpolation=None)
	for p in paths:
		try:
			with p.open("r", encoding="utf-8") as fh:
				cp.read_file(fh)
		except (OSError, configparser.Error) as exc:
			raise ConfigError(f"Failed reading '{p}': {exc}") from exc
		LOG.info("Loaded INI file: %s", p)

	wanted = section.lower()
	for name in cp.sections():
		if name.lower() == wanted:
			return {key.lower(): parse_value(value) for key, value in cp.items(name)}
	LOG.debug("Section [%s] not present, using defaults", section)
	return {}


def read_json_section(path: PathLike, section: str = DEFAULT_SECTION) -> Dict[str, Any]:
	"""
	Read one object from a JSON file shaped ``{"section": {"key": value}}``.

	A flat top-level object (no section wrapper) is accepted as the section itself.

	:param path: JSON path.
	:param section: Section name (case-insensitive).
	:return: ``key -> value``.
	:raises ConfigError: On IO/parse errors or invalid shapes.
	"""
	p = Path(path)
	if not p.exists():
		raise ConfigError(f"Missing JSON config file: {p}")
	try:
		with p.open("r", encoding="utf-8") as fh:
			obj = json.load(fh)
	except (OSError, json.JSONDecodeError) as exc:
		raise ConfigError(f"Failed reading JSON '{p}': {exc}") from exc

	if not isinstance(obj, dict):
		raise ConfigError(f"Top-level JSON in '{p}' must be an object.")
	LOG.info("Loaded JSON file: %s", p)

	lowered = {str(k).lower(): v for k, v in obj.items()}
	body = lowered.get(section.lower(), lowered)
	if not isinstance(body, Mapping):
		raise ConfigError(f"Section '{section}' in '{p}' must be an object.")
	return {str(k).lower(): v for k, v in body.items()}


def load_options(path: PathLike, *, section: str = DEFAULT_SECTION, **overrides: Any) -> EngineOptions:
	"""
	Build :class:`EngineOptions` from an INI (``.ini``/``.cfg``) or JSON file.

	:param path: Option file.
	:param section: Section holding the options.
	:param overrides: Keyword values applied on top of the file.
	:return: Validated options.
	:raises ConfigError: On unreadable files or invalid option values.
	"""
	p = Path(path)
	if p.suffix.lower() == ".json":
		values = read_json_section(p, section)
	else:
		values = read_ini_section([p], section)
	values.update({k.lower(): v for k, v in overrides.items()})
	return EngineOptions.from_mapping(values)
