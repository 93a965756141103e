# src/numstat/inference/ranking.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..imports import numpy as np  # type: ignore
from ..logutil import get_logger

LOG = get_logger(__name__)

__all__ = ["RankedValues", "assign_ranks", "tie_correction"]

_ORDERS = ("asc", "desc")
_TIES = ("mean", "random")


@dataclass(frozen=True)
class RankedValues:
	"""
	Outcome of :func:`assign_ranks`.

	:param values: Input values in rank order.
	:param ranks: Rank of ``values[i]``.
	:param positions: Input index of ``values[i]``.
	:param frequencies: Number of occurrences per distinct value.
	"""
	values: List[float]
	ranks: List[float]
	positions: List[int]
	frequencies: Dict[float, int]

	def by_position(self) -> List[float]:
		"""Ranks rearranged into input order."""
		out = [0.0] * len(self.ranks)
		for position, rank in zip(self.positions, self.ranks):
			out[position] = rank
		return out

	def tie_groups(self) -> List[int]:
		"""Sizes of the groups of tied values (groups of one included)."""
		return list(self.frequencies.values())


def assign_ranks(
		values: Sequence[float],
		order: str = "asc",
		ties: str = "mean",
		random_state: Optional[Any] = None,
) -> RankedValues:
	"""
	Rank numeric values, 1-based.

	With ``order="desc"`` the largest value gets rank 1. Tied values get the mean
	of the rank slots they occupy (``ties="mean"``), or the slots are dealt out in
	random order (``ties="random"``, drawn from ``numpy.random.default_rng(random_state)``).

	:param values: Numeric values.
	:param order: ``"asc"`` or ``"desc"``.
	:param ties: ``"mean"`` or ``"random"``.
	:param random_state: Seed or ``Generator`` for the random tie policy.
	:return: :class:`RankedValues`.
	:raises ValueError: For an unknown ``order`` or ``ties`` policy.
	"""
	order = order.lower()
	ties = ties.lower()
	if order not in _ORDERS:
		raise ValueError(f"order must be one of {_ORDERS}, got {order!r}")
	if ties not in _TIES:
		raise ValueError(f"ties must be one of {_TIES}, got {ties!r}")

	arr = np.asarray(values, dtype=float)
	keys = -arr if order == "desc" else arr
	permutation = np.argsort(keys, kind="stable")
	ordered = arr[permutation]

	ranks = np.arange(1, arr.size + 1, dtype=float)
	rng = np.random.default_rng(random_state) if ties == "random" else None
	frequencies: Dict[float, int] = {}
	start = 0
	while start < arr.size:
		stop = start + 1
		while stop < arr.size and ordered[stop] == ordered[start]:
			stop += 1
		size = stop - start
		frequencies[float(ordered[start])] = size
		if size > 1:
			if rng is None:
				# mean of the slots start+1 .. stop
				ranks[start:stop] = start + size / 2 + 0.5
			else:
				ranks[start:stop] = rng.permutation(ranks[start:stop])
		start = stop

	if rng is not None:
		LOG.debug("Random tie ranking over %d values", arr.size)
	return RankedValues(
		values=ordered.tolist(),
		ranks=ranks.tolist(),
		positions=[int(i) for i in permutation],
		frequencies=frequencies,
	)


def tie_correction(frequencies: Mapping[Any, int]) -> float:
	"""
	Sum of ``t**3 - t`` over the tie-group sizes ``t``.

	>>> tie_correction({1.0: 2, 2.0: 1, 3.0: 3})
	30
	"""
	return sum(t ** 3 - t for t in frequencies.values())
