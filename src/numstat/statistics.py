# src/numstat/statistics.py

from __future__ import annotations

from typing import Any, Optional

from .config import EngineOptions, load_options
from .distributions.poisson import PoissonDistribution
from .inference.correlation import CorrelationMeasures
from .inference.exact import ExactTests
from .inference.nonparametric import NonparametricTests
from .inference.parametric import ParametricTests
from .logutil import get_logger
from .special.summation import Summation

LOG = get_logger(__name__)

__all__ = ["Statistics"]


class Statistics(
	ExactTests,
	NonparametricTests,
	CorrelationMeasures,
	ParametricTests,
	PoissonDistribution,
	Summation,
):
	"""
	One-stop engine combining the special functions, the distributions and the
	hypothesis tests.

	Every instance owns its factorial cache, its memoized standard normal table
	and its diagnostics log. Invalid arguments are reported through
	:attr:`diagnostics` (and a WARNING on the ``numstat`` logger) and answered with
	``None``; with ``raise_errors=True`` the matching :class:`StatisticsError` is
	raised instead.

	Examples
	--------
	>>> stats = Statistics(suppress_warnings=True)
	>>> round(stats.gamma(5))
	24
	>>> stats.factorial(-1) is None
	True
	>>> stats.diagnostics.last.kind.value
	'domain'
	"""

	def __init__(self, options: Optional[EngineOptions] = None, **overrides: Any) -> None:
		super().__init__(options, **overrides)
		LOG.debug("Created %r with %s", self, self.options)

	@classmethod
	def from_file(cls, path: Any, *, section: str = "numstat", **overrides: Any) -> "Statistics":
		"""
		Build an engine from an INI or JSON options file.

		:param path: File to read (see :func:`numstat.config.load_options`).
		:param section: Section holding the options.
		:param overrides: Option values applied on top of the file.
		:raises ConfigError: When the file cannot be read or holds invalid options.
		"""
		return cls(load_options(path, section=section, **overrides))
