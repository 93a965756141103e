# src/numstat/data/__init__.py
"""
Boundary to the caller's data: scale tags, sequence coercion, pairing and
contingency tables.
"""

from .scale import Scale
from .coerce import PairedValues, as_list, drop_missing, is_missing, reduce_to_pairs, validate_input
from .contingency import contingency_table, table_from_counts, two_by_two

__all__ = [
	"Scale",
	"PairedValues",
	"as_list",
	"drop_missing",
	"is_missing",
	"reduce_to_pairs",
	"validate_input",
	"contingency_table",
	"table_from_counts",
	"two_by_two",
]
