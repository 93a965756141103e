# src/numstat/logutil.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional, Union

PathLike = Union[str, Path]

ROOT_LOGGER = "numstat"

ConsoleLevelName = Literal[
	"CRITICAL",
	"ERROR",
	"WARNING",
	"INFO",
	"DEBUG",
	"NOTSET",
]

LevelLike = Union[int, ConsoleLevelName]


def _normalize_level(value: LevelLike, *, param_name: str) -> int:
	if isinstance(value, int):
		return value

	resolved = logging.getLevelName(value.upper())
	if isinstance(resolved, int):
		return resolved

	raise ValueError(f"Unknown logging level name for {param_name}: {value}")


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
	"""
	Return a package logger.

	Module loggers (``numstat.special.gamma`` ...) propagate to the package root
	logger, which receives a single console handler on first use.

	:param name: Logger name, usually ``__name__`` of the calling module.
	:return: The logger.
	"""
	root = logging.getLogger(ROOT_LOGGER)
	if not root.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter("[%(levelname)s] numstat: %(message)s"))
		root.addHandler(handler)
		root.setLevel(logging.INFO)
		root.propagate = False
	return logging.getLogger(name)


def configure_logging(
		*,
		console_level: ConsoleLevelName = "WARNING",
		file_path: Optional[PathLike] = None,
		file_level: Optional[LevelLike] = None,
		mode: str = "a",
		formatter: Optional[logging.Formatter] = None,
		propagate: bool = False
) -> logging.Logger:
	"""
	Configure the package root logger.

	Diagnostics of the statistics engine are emitted at WARNING, progress of long
	computations (Barnard's grid search, table enumeration) at DEBUG.

	:param console_level: Console handler level.
	:param file_path: Optional log file path to add a file handler.
	:param file_level: File handler level (defaults to ``console_level``).
	:param mode: ``'w'`` to overwrite or ``'a'`` to append.
	:param formatter: Custom formatter; default includes a timestamp.
	:param propagate: Whether to propagate to the Python root logger.
	:return: The configured package logger.
	"""
	console_level_value = _normalize_level(console_level, param_name="console_level")
	file_level_value = (
		_normalize_level(file_level, param_name="file_level")
		if file_level is not None
		else console_level_value
	)

	log = get_logger(ROOT_LOGGER)
	log.setLevel(min(console_level_value, file_level_value))
	log.propagate = propagate

	fmt = formatter or logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s: %(message)s"
	)

	for handler in log.handlers:
		if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
			handler.setLevel(console_level_value)
			handler.setFormatter(fmt)

	if file_path:
		path = Path(file_path)
		path.parent.mkdir(parents=True, exist_ok=True)
		if any(getattr(h, "baseFilename", None) == str(path.resolve()) for h in log.handlers):
			return log
		file_handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
		file_handler.setLevel(file_level_value)
		file_handler.setFormatter(fmt)
		log.addHandler(file_handler)

	return log
