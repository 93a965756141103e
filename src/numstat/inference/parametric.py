# src/numstat/inference/parametric.py

from __future__ import annotations

import math
from typing import Any, Optional

from ..data import Scale, drop_missing
from ..data.scale import ScaleLike
from ..distributions.students_t import StudentsTDistribution
from ..errors import ErrorKind
from ..imports import numpy as np  # type: ignore
from .results import TTestResult

__all__ = ["ParametricTests"]


class ParametricTests(StudentsTDistribution):
	"""Student's t-tests."""

	def _t_result(self, t: float, df: int, missings: int, signed: bool = False) -> Optional[TTestResult]:
		if math.isinf(t):
			p = 0.0
		else:
			p = self.students_t_cumulative_value(t if signed else abs(t), df)
			if p is None:
				return None
			if p > 0.5:
				p = 1 - p
		return TTestResult(t_statistic=t, degrees_of_freedom=df, p_one_sided=p, p_two_sided=2 * p, missings=missings)

	def _sample(self, data: Any, operation: str, scale: Optional[ScaleLike]):
		values = self._values(data, operation, Scale.INTERVAL, scale)
		if values is None:
			return None
		values, missings = drop_missing(values)
		if len(values) < 2:
			return self._fail(ErrorKind.DOMAIN, operation, f"At least two observations are required, got {len(values)}.")
		return np.asarray(values, dtype=float), missings

	def students_t_test_one_sample(
			self,
			data: Any,
			null_hypothesis_mean: float,
			scale: Optional[ScaleLike] = None,
	) -> Optional[TTestResult]:
		"""
		One-sample t-test ``t = sqrt(n) (mean - mu0) / s`` with ``n - 1`` df.

		:param data: Interval or metric observations; missing values are skipped.
		:param null_hypothesis_mean: Mean under the null hypothesis.
		:param scale: Declared scale of ``data``.
		:return: :class:`TTestResult` or ``None`` on invalid input.
		"""
		op = "students_t_test_one_sample"
		if self._non_numeric(op, null_hypothesis_mean=null_hypothesis_mean):
			return None
		sample = self._sample(data, op, scale)
		if sample is None:
			return None
		values, missings = sample
		deviation = float(values.std(ddof=1))
		if deviation == 0:
			return self._fail(ErrorKind.DOMAIN, op, "The sample has no variance.")
		t = math.sqrt(values.size) * (float(values.mean()) - null_hypothesis_mean) / deviation
		return self._t_result(t, values.size - 1, missings)

	def students_t_test_two_samples(
			self,
			first: Any,
			second: Any,
			null_hypothesis_difference: float = 0,
			dependent: bool = False,
			scale: Optional[ScaleLike] = None,
	) -> Optional[TTestResult]:
		"""
		Two-sample t-test.

		``dependent=True`` runs the paired test on the differences of the complete
		pairs: ``t = sqrt(n) (mean(d) - d0) / s_d`` with ``n - 1`` df.
		Otherwise the pooled test for independent samples:
		``t = (m1 - m2 - d0) / s_p * sqrt(n m / (n + m))`` with ``n + m - 2`` df.

		:param first: First sample.
		:param second: Second sample.
		:param null_hypothesis_difference: Difference of means under the null hypothesis.
		:param dependent: Paired observations.
		:param scale: Declared scale of both samples.
		:return: :class:`TTestResult` or ``None`` on invalid input.
		"""
		op = "students_t_test_two_samples"
		if self._non_numeric(op, null_hypothesis_difference=null_hypothesis_difference):
			return None

		if dependent:
			pairs = self._paired(first, second, op, Scale.INTERVAL, scale, minimum=2)
			if pairs is None:
				return None
			differences = np.asarray(pairs.first, dtype=float) - np.asarray(pairs.second, dtype=float)
			deviation = float(differences.std(ddof=1))
			if deviation == 0:
				return self._fail(ErrorKind.DOMAIN, op, "The paired differences have no variance.")
			n = differences.size
			t = math.sqrt(n) * (float(differences.mean()) - null_hypothesis_difference) / deviation
			return self._t_result(t, n - 1, pairs.missings, signed=True)

		first_sample = self._sample(first, op, scale)
		if first_sample is None:
			return None
		second_sample = self._sample(second, op, scale)
		if second_sample is None:
			return None
		x, missings_first = first_sample
		y, missings_second = second_sample
		n, m = x.size, y.size
		pooled = math.sqrt(((n - 1) * float(x.var(ddof=1)) + (m - 1) * float(y.var(ddof=1))) / (n + m - 2))
		if pooled == 0:
			return self._fail(ErrorKind.DOMAIN, op, "Both samples have no variance.")
		t = (float(x.mean()) - float(y.mean()) - null_hypothesis_difference) / pooled
		t *= math.sqrt(n * m / (n + m))
		return self._t_result(t, n + m - 2, missings_first + missings_second, signed=True)
