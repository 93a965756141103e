# src/numstat/distributions/tables.py

from __future__ import annotations

from typing import Dict, Iterator

from ..numeric import table_key

__all__ = ["STEP", "DistributionTable", "table_key", "steps", "ordered_table"]

STEP = 0.01

DistributionTable = Dict[str, float]


def steps(start: int = 0) -> Iterator[float]:
	"""Endless grid ``start*STEP, (start+1)*STEP, ...`` computed from the index, not accumulated."""
	i = start
	while True:
		yield i * STEP
		i += 1


def ordered_table(table: DistributionTable) -> DistributionTable:
	"""Return ``table`` with its ``"x.xx"`` keys sorted by numeric value."""
	return dict(sorted(table.items(), key=lambda item: float(item[0])))
