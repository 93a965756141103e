# src/numstat/imports/lazyproxy.py

from __future__ import annotations

import importlib
import importlib.util
from types import ModuleType
from typing import Any, Optional

__all__ = ["LazyModule", "lazy_module"]


class LazyModule:
	"""
	Stand-in for numpy/pandas that imports the real module on first attribute access.

	``import numstat`` therefore stays cheap; a missing dependency surfaces as an
	:class:`ImportError` naming what numstat needs it for and how to install it.
	"""
	def __init__(self, name: str, *, install: Optional[str] = None, reason: Optional[str] = None) -> None:
		self._name = name
		self._mod: Optional[ModuleType] = None
		self._install = install
		self._reason = reason

	@property
	def available(self) -> bool:
		"""True when the module is loaded or importable."""
		return self._mod is not None or importlib.util.find_spec(self._name) is not None

	def _load(self) -> ModuleType:
		if self._mod is None:
			try:
				self._mod = importlib.import_module(self._name)
			except ImportError as exc:
				message = f"numstat needs '{self._name}'"
				if self._reason:
					message += f" for {self._reason}"
				if self._install:
					message += f"; install it with '{self._install}'"
				raise ImportError(message + ".") from exc
		return self._mod

	def __getattr__(self, item: str) -> Any:
		return getattr(self._load(), item)

	def __repr__(self) -> str:
		return f"<LazyModule {self._name!r} ({'loaded' if self._mod is not None else 'not loaded'})>"


def lazy_module(name: str, *, install: Optional[str] = None, reason: Optional[str] = None) -> LazyModule:
	"""Proxy for ``name``; ``install`` and ``reason`` end up in the ImportError message."""
	return LazyModule(name, install=install, reason=reason)
