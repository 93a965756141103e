"""
numstat: special functions, probability distributions and hypothesis tests.

Top-level API keeps imports lazy:

    from numstat import Statistics
    stats = Statistics(epsilon=1e-6)
    stats.gamma(3.4)
    stats.barnards_test(2, 10, 15, 3)

    from numstat import load_options
    stats = Statistics(load_options("numstat.ini"))

    # building blocks stay under their own namespaces
    from numstat.special import kahan_sum
    from numstat.inference import assign_ranks
"""

from importlib import import_module
from importlib.metadata import version, PackageNotFoundError as _PNF
from typing import TYPE_CHECKING

try:
	__version__ = version("numstat")
except _PNF:
	__version__ = "0.0.0+local"

__all__ = [
	"__version__",
	# main facade
	"Statistics",
	"EngineOptions", "GammaMethod", "load_options", "configure_logging",
	# errors
	"StatisticsError", "MissingArgumentError", "DomainViolationError", "TypeViolationError",
	"ConfigError", "ErrorKind", "Diagnostic",
	# data boundary
	"Scale",
	# namespaces
	"imports", "config", "data", "special", "distributions", "inference", "logutil",
]

# --- lazy maps ---------------------------------------------------------------
_CONFIG_EXPORTS = {"EngineOptions", "GammaMethod", "load_options"}

_ERROR_EXPORTS = {
	"StatisticsError", "MissingArgumentError", "DomainViolationError", "TypeViolationError",
	"ConfigError", "ErrorKind", "Diagnostic",
}

_NAMESPACES = {"imports", "config", "data", "special", "distributions", "inference", "logutil"}


def __getattr__(name: str):
	# --- main facade ---
	if name == "Statistics":
		return import_module("numstat.statistics").Statistics
	if name == "configure_logging":
		return import_module("numstat.logutil").configure_logging
	if name == "Scale":
		return import_module("numstat.data.scale").Scale

	# --- namespaces (lazy) ---
	if name in _NAMESPACES:
		return import_module(f"numstat.{name}")

	# --- lazy re-exports ---
	if name in _CONFIG_EXPORTS:
		return getattr(import_module("numstat.config"), name)
	if name in _ERROR_EXPORTS:
		return getattr(import_module("numstat.errors"), name)

	raise AttributeError(f"module 'numstat' has no attribute {name!r}")


# Help type-checkers without eager imports
if TYPE_CHECKING:
	from . import imports, config, data, special, distributions, inference, logutil  # noqa: F401
	from .statistics import Statistics  # noqa: F401
	from .config import EngineOptions, GammaMethod, load_options  # noqa: F401
	from .logutil import configure_logging  # noqa: F401
	from .data.scale import Scale  # noqa: F401
	from .errors import (  # noqa: F401
		StatisticsError, MissingArgumentError, DomainViolationError, TypeViolationError,
		ConfigError, ErrorKind, Diagnostic,
	)
