# src/numstat/inference/__init__.py
"""
Hypothesis tests and association measures built on the distributions.
"""

from importlib import import_module
from typing import TYPE_CHECKING

__all__ = [
	# functions
	"assign_ranks", "tie_correction", "wald_statistic", "nuisance_grid", "concordance",
	# mixins
	"ExactTests", "NonparametricTests", "CorrelationMeasures", "ParametricTests",
	# results
	"RankedValues",
	"BarnardResult", "BinomialTestResult", "SignTestResult",
	"MannWhitneyResult", "ChiSquaredTestResult",
	"CovarianceResult", "CorrelationResult",
	"NormalSignificance", "StudentSignificance", "SpearmanResult",
	"TauSignificance", "KendallResult", "GoodmanKruskalResult",
	"RegressionLine", "RegressionResult", "TTestResult",
]

_RESULTS = {
	"BarnardResult", "BinomialTestResult", "SignTestResult",
	"MannWhitneyResult", "ChiSquaredTestResult",
	"CovarianceResult", "CorrelationResult",
	"NormalSignificance", "StudentSignificance", "SpearmanResult",
	"TauSignificance", "KendallResult", "GoodmanKruskalResult",
	"RegressionLine", "RegressionResult", "TTestResult",
}


def __getattr__(name: str):
	mod_of = {
		"assign_ranks": "numstat.inference.ranking",
		"tie_correction": "numstat.inference.ranking",
		"RankedValues": "numstat.inference.ranking",
		"wald_statistic": "numstat.inference.exact",
		"nuisance_grid": "numstat.inference.exact",
		"ExactTests": "numstat.inference.exact",
		"NonparametricTests": "numstat.inference.nonparametric",
		"concordance": "numstat.inference.correlation",
		"CorrelationMeasures": "numstat.inference.correlation",
		"ParametricTests": "numstat.inference.parametric",
	}
	if name in _RESULTS:
		return getattr(import_module("numstat.inference.results"), name)
	if name in mod_of:
		mod = import_module(mod_of[name])
		return getattr(mod, name)
	raise AttributeError(f"module 'numstat.inference' has no attribute {name!r}")


if TYPE_CHECKING:
	from .ranking import assign_ranks, tie_correction, RankedValues
	from .exact import wald_statistic, nuisance_grid, ExactTests
	from .nonparametric import NonparametricTests
	from .correlation import concordance, CorrelationMeasures
	from .parametric import ParametricTests
	from .results import (
		BarnardResult, BinomialTestResult, SignTestResult,
		MannWhitneyResult, ChiSquaredTestResult,
		CovarianceResult, CorrelationResult,
		NormalSignificance, StudentSignificance, SpearmanResult,
		TauSignificance, KendallResult, GoodmanKruskalResult,
		RegressionLine, RegressionResult, TTestResult,
	)
