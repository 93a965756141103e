# src/numstat/special/__init__.py
"""
Special functions: compensated summation, factorials, Gamma, Beta and the
incomplete Gamma/Beta functions.
"""

from importlib import import_module
from typing import TYPE_CHECKING

__all__ = [
	# functions
	"kahan_sum", "plain_sum",
	"stirling_gamma", "spouge_gamma", "binomial_ratio_product",
	"log_beta", "fraction_depth", "beta_fraction", "continued_fraction_beta", "regularised_fraction",
	"gamma_depth", "gamma_series_sum", "gamma_fraction",
	# classes
	"FactorialCache", "GammaMethod",
	"Summation", "GammaFunctions", "BetaFunctions", "IncompleteGammaFunctions",
]


def __getattr__(name: str):
	mod_of = {
		"kahan_sum": "numstat.special.summation",
		"plain_sum": "numstat.special.summation",
		"Summation": "numstat.special.summation",
		"FactorialCache": "numstat.special.factorial",
		"stirling_gamma": "numstat.special.gamma",
		"spouge_gamma": "numstat.special.gamma",
		"binomial_ratio_product": "numstat.special.gamma",
		"GammaMethod": "numstat.special.gamma",
		"GammaFunctions": "numstat.special.gamma",
		"log_beta": "numstat.special.beta",
		"fraction_depth": "numstat.special.beta",
		"beta_fraction": "numstat.special.beta",
		"continued_fraction_beta": "numstat.special.beta",
		"regularised_fraction": "numstat.special.beta",
		"BetaFunctions": "numstat.special.beta",
		"gamma_depth": "numstat.special.incomplete_gamma",
		"gamma_series_sum": "numstat.special.incomplete_gamma",
		"gamma_fraction": "numstat.special.incomplete_gamma",
		"IncompleteGammaFunctions": "numstat.special.incomplete_gamma",
	}
	if name in mod_of:
		mod = import_module(mod_of[name])
		return getattr(mod, name)
	raise AttributeError(f"module 'numstat.special' has no attribute {name!r}")


if TYPE_CHECKING:
	from .summation import kahan_sum, plain_sum, Summation
	from .factorial import FactorialCache
	from .gamma import stirling_gamma, spouge_gamma, binomial_ratio_product, GammaMethod, GammaFunctions
	from .beta import (
		log_beta, fraction_depth, beta_fraction, continued_fraction_beta, regularised_fraction, BetaFunctions,
	)
	from .incomplete_gamma import gamma_depth, gamma_series_sum, gamma_fraction, IncompleteGammaFunctions
