# src/numstat/imports/__init__.py

from __future__ import annotations

from .lazyproxy import LazyModule, lazy_module

np = numpy = lazy_module(
	"numpy",
	install="pip install numpy",
	reason="array coercion, rank permutations and the Barnard grid search"
)
pd = pandas = lazy_module(
	"pandas",
	install="pip install pandas",
	reason="Series/DataFrame input and contingency tables"
)

__all__ = ["LazyModule", "lazy_module", "np", "numpy", "pd", "pandas"]
