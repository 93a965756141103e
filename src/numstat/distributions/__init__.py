# src/numstat/distributions/__init__.py
"""
Probability distributions built on the special-function engines:
normal, binomial, poisson, Student's t and chi-squared.
"""

from importlib import import_module
from typing import TYPE_CHECKING

__all__ = [
	"DistributionTable", "steps", "ordered_table", "table_key",
	"normal_series_value", "erf_approximation", "inverse_erf_approximation", "poisson_mass",
	"NormalDistribution", "BinomialDistribution", "PoissonDistribution",
	"StudentsTDistribution", "ChiSquaredDistribution",
]


def __getattr__(name: str):
	mod_of = {
		"DistributionTable": "numstat.distributions.tables",
		"steps": "numstat.distributions.tables",
		"ordered_table": "numstat.distributions.tables",
		"table_key": "numstat.distributions.tables",
		"normal_series_value": "numstat.distributions.normal",
		"erf_approximation": "numstat.distributions.normal",
		"inverse_erf_approximation": "numstat.distributions.normal",
		"NormalDistribution": "numstat.distributions.normal",
		"BinomialDistribution": "numstat.distributions.binomial",
		"poisson_mass": "numstat.distributions.poisson",
		"PoissonDistribution": "numstat.distributions.poisson",
		"StudentsTDistribution": "numstat.distributions.students_t",
		"ChiSquaredDistribution": "numstat.distributions.chi_squared",
	}
	if name in mod_of:
		mod = import_module(mod_of[name])
		return getattr(mod, name)
	raise AttributeError(f"module 'numstat.distributions' has no attribute {name!r}")


if TYPE_CHECKING:
	from .tables import DistributionTable, steps, ordered_table, table_key
	from .normal import normal_series_value, erf_approximation, inverse_erf_approximation, NormalDistribution
	from .binomial import BinomialDistribution
	from .poisson import poisson_mass, PoissonDistribution
	from .students_t import StudentsTDistribution
	from .chi_squared import ChiSquaredDistribution
