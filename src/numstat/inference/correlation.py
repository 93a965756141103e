# src/numstat/inference/correlation.py

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple

from ..data import PairedValues, Scale
from ..data.scale import ScaleLike
from ..distributions.normal import NormalDistribution, normal_series_value
from ..distributions.students_t import StudentsTDistribution
from ..errors import ErrorKind
from ..imports import numpy as np  # type: ignore
from ..logutil import get_logger
from ..numeric import normal_round
from .ranking import assign_ranks, tie_correction
from .results import (
	CorrelationResult,
	CovarianceResult,
	GoodmanKruskalResult,
	KendallResult,
	NormalSignificance,
	RegressionLine,
	RegressionResult,
	SpearmanResult,
	StudentSignificance,
	TauSignificance,
)

LOG = get_logger(__name__)

__all__ = ["CorrelationMeasures", "concordance"]


def concordance(first: Sequence[float], second: Sequence[float]) -> Tuple[int, int]:
	"""
	Count concordant and discordant pairs of observations.

	Pairs tied on either variable count as neither.

	:return: ``(concordant, discordant)``.
	"""
	x = np.asarray(first, dtype=float)
	y = np.asarray(second, dtype=float)
	upper = np.triu_indices(x.size, 1)
	product = np.sign(x[:, None] - x[None, :])[upper] * np.sign(y[:, None] - y[None, :])[upper]
	return int((product > 0).sum()), int((product < 0).sum())


def _centered(pairs: PairedValues) -> Tuple["np.ndarray", "np.ndarray"]:
	x = np.asarray(pairs.first, dtype=float)
	y = np.asarray(pairs.second, dtype=float)
	return x - x.mean(), y - y.mean()


class CorrelationMeasures(NormalDistribution, StudentsTDistribution):
	"""Covariance, correlation coefficients, rank correlations and simple linear regression."""

	# --- Tail helpers ---
	def _normal_upper_tail(self, z: float) -> float:
		"""``1 - Phi(|z|)`` rounded like :meth:`normal_cumulative_value`; accepts infinite ``z``."""
		return 1 - normal_round(normal_series_value(abs(z), self.options.z_table_iterations), 5)

	def _student_upper_tail(self, t: float, df: float) -> float:
		"""``1 - T(|t|, df)``; ``0`` for infinite ``t``."""
		if math.isinf(t):
			return 0.0
		return 1 - self.students_t_cumulative_value(abs(t), df)

	# --- Moments ---
	def covariance(
			self,
			first: Any,
			second: Any,
			corrected: bool = True,
			scale: Optional[ScaleLike] = None,
	) -> Optional[CovarianceResult]:
		"""
		Covariance of the complete pairs of two interval variables.

		:param first: First variable.
		:param second: Second variable.
		:param corrected: Divide by ``n - 1`` (sample covariance) instead of ``n``.
		:param scale: Declared scale of both variables.
		:return: :class:`CovarianceResult` or ``None`` on invalid input.
		"""
		op = "covariance"
		pairs = self._paired(first, second, op, Scale.INTERVAL, scale, minimum=2 if corrected else 1)
		if pairs is None:
			return None
		dx, dy = _centered(pairs)
		divisor = len(pairs) - 1 if corrected else len(pairs)
		return CovarianceResult(covariance=float((dx * dy).sum() / divisor), missings=pairs.missings)

	def correlation_coefficient(
			self,
			first: Any,
			second: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[CorrelationResult]:
		"""
		Pearson's product-moment correlation over the complete pairs.

		Means and variances are taken from the paired values only. A variable
		without variance gives a coefficient of ``0``.
		"""
		op = "correlation_coefficient"
		pairs = self._paired(first, second, op, Scale.INTERVAL, scale)
		if pairs is None:
			return None
		dx, dy = _centered(pairs)
		variance_first = float((dx * dx).sum())
		variance_second = float((dy * dy).sum())
		if variance_first > 0 and variance_second > 0:
			coefficient = float((dx * dy).sum()) / math.sqrt(variance_first * variance_second)
		else:
			coefficient = 0.0
		return CorrelationResult(correlation_coefficient=coefficient, missings=pairs.missings)

	def fisher_transformation(self, coefficient: float) -> Optional[float]:
		"""
		Fisher's z transformation ``atanh(r)``.

		:param coefficient: Correlation coefficient in ``[-1, 1]``; ``±1`` map to ``±inf``.
		:return: ``z`` or ``None`` on invalid input.
		"""
		op = "fisher_transformation"
		if self._non_numeric(op, coefficient=coefficient):
			return None
		if coefficient < -1 or coefficient > 1:
			return self._fail(
				ErrorKind.DOMAIN, op,
				f"The Fisher transformation is only defined for correlation coefficients within [-1, 1], got {coefficient}.",
			)
		if abs(coefficient) == 1:
			return math.copysign(math.inf, coefficient)
		return math.atanh(coefficient)

	# --- Rank correlations ---
	def spearmans_rho(
			self,
			first: Any,
			second: Any,
			adjust_for_ties: bool = False,
			scale: Optional[ScaleLike] = None,
	) -> Optional[SpearmanResult]:
		"""
		Spearman's rank correlation with two significance approximations.

		Both variables are ranked in descending order with mean ranks for ties.
		Without tie adjustment ``rho = 1 - 6 sum(d^2) / (n^3 - n)``; with it

		``rho = (n^3 - n - Tx/2 - Ty/2 - 6 sum(d^2)) / sqrt((n^3 - n - Tx)(n^3 - n - Ty))``

		where ``Tx``, ``Ty`` are the sums of ``t^3 - t`` over the tie groups.

		The normal significance uses ``z = sqrt((n - 3) / 1.06) atanh(rho)``, the
		Student's one uses ``t = rho sqrt((n - 2) / (1 - rho^2))`` with ``n - 2`` df.

		:param first: First variable (at least ordinal).
		:param second: Second variable (at least ordinal).
		:param adjust_for_ties: Use the tie-corrected formula.
		:param scale: Declared scale of both variables.
		:return: :class:`SpearmanResult` or ``None`` on invalid input.
		"""
		op = "spearmans_rho"
		pairs = self._paired(first, second, op, Scale.ORDINAL, scale, minimum=3)
		if pairs is None:
			return None
		n = len(pairs)
		ranked_first = assign_ranks(pairs.first, order="desc")
		ranked_second = assign_ranks(pairs.second, order="desc")
		distances = sum(
			(a - b) ** 2 for a, b in zip(ranked_first.by_position(), ranked_second.by_position())
		)
		cube = n ** 3 - n

		if adjust_for_ties:
			tx = tie_correction(ranked_first.frequencies)
			ty = tie_correction(ranked_second.frequencies)
			denominator = (cube - tx) * (cube - ty)
			if denominator <= 0:
				return self._fail(ErrorKind.DOMAIN, op, "Both variables need at least two distinct values.")
			rho = (cube - 0.5 * tx - 0.5 * ty - 6 * distances) / math.sqrt(denominator)
		else:
			rho = 1 - 6 * distances / cube

		df = n - 2
		if abs(rho) >= 1:
			z = t = math.copysign(math.inf, rho)
		else:
			z = math.sqrt((df - 1) / 1.06) * math.atanh(rho)
			t = rho * math.sqrt(df / (1 - rho * rho))
		p_normal = self._normal_upper_tail(z)
		p_student = self._student_upper_tail(t, df)
		return SpearmanResult(
			rho=rho,
			significance_normal=NormalSignificance(z_score=z, p_one_tailed=p_normal, p_two_tailed=2 * p_normal),
			significance_student=StudentSignificance(
				degrees_of_freedom=df, t_statistic=t, p_one_tailed=p_student, p_two_tailed=2 * p_student,
			),
			missings=pairs.missings,
		)

	def kendalls_tau(
			self,
			first: Any,
			second: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[KendallResult]:
		"""
		Kendall's tau-a, tau-b and Stuart's tau-c.

		With ``S = concordant - discordant`` and ``n0 = n (n - 1) / 2``:

		- ``tau_a = S / n0``, ``z = 3 S / sqrt(n (n - 1)(2n + 5) / 2)``
		- ``tau_b = S / sqrt((n0 - n1)(n0 - n2))`` where ``n1``, ``n2`` count the
		  pairs tied on the first and second variable. Its ``z`` uses the
		  tie-corrected variance of ``S`` (Kendall 1970)::

			var(S) = (v0 - vt - vu) / 18
			         + sum t(t-1) sum u(u-1) / (2 n (n-1))
			         + sum t(t-1)(t-2) sum u(u-1)(u-2) / (9 n (n-1)(n-2))

		- ``tau_c = 2 m S / (n^2 (m - 1))`` with ``m`` the smaller number of distinct values.

		One-tailed p-values are ``Phi(-|z|)``.

		:return: :class:`KendallResult` or ``None`` on invalid input.
		"""
		op = "kendalls_tau"
		pairs = self._paired(first, second, op, Scale.ORDINAL, scale, minimum=2)
		if pairs is None:
			return None
		n = len(pairs)
		concordant, discordant = concordance(pairs.first, pairs.second)
		s = concordant - discordant
		n0 = n * (n - 1) / 2

		ties_first = np.unique(np.asarray(pairs.first, dtype=float), return_counts=True)[1].astype(float)
		ties_second = np.unique(np.asarray(pairs.second, dtype=float), return_counts=True)[1].astype(float)
		if ties_first.size < 2 or ties_second.size < 2:
			return self._fail(ErrorKind.DOMAIN, op, "Both variables need at least two distinct values.")
		n1 = float((ties_first * (ties_first - 1) / 2).sum())
		n2 = float((ties_second * (ties_second - 1) / 2).sum())

		tau_a = s / n0
		z_a = 3 * s / math.sqrt(0.5 * n * (n - 1) * (2 * n + 5))
		p_a = self.normal_cumulative_value(-abs(z_a))

		tau_b = s / math.sqrt((n0 - n1) * (n0 - n2))
		v0 = n * (n - 1) * (2 * n + 5)
		vt = float((ties_first * (ties_first - 1) * (2 * ties_first + 5)).sum())
		vu = float((ties_second * (ties_second - 1) * (2 * ties_second + 5)).sum())
		v1 = float((ties_first * (ties_first - 1)).sum()) * float((ties_second * (ties_second - 1)).sum()) / (2 * n * (n - 1))
		v2 = 0.0
		if n > 2:
			v2 = (
				float((ties_first * (ties_first - 1) * (ties_first - 2)).sum())
				* float((ties_second * (ties_second - 1) * (ties_second - 2)).sum())
				/ (9 * n * (n - 1) * (n - 2))
			)
		variance = (v0 - vt - vu) / 18 + v1 + v2
		z_b = s / math.sqrt(variance)
		p_b = self.normal_cumulative_value(-abs(z_b))

		m = min(ties_first.size, ties_second.size)
		tau_c = 2 * m * s / (n * n * (m - 1))
		LOG.debug("%s: n=%d, concordant=%d, discordant=%d", op, n, concordant, discordant)
		return KendallResult(
			tau_a=TauSignificance(tau=tau_a, z_score=z_a, p_one_tailed=p_a, p_two_tailed=2 * p_a),
			tau_b=TauSignificance(tau=tau_b, z_score=z_b, p_one_tailed=p_b, p_two_tailed=2 * p_b),
			tau_c=tau_c,
			missings=pairs.missings,
		)

	def goodman_kruskals_gamma(
			self,
			first: Any,
			second: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[GoodmanKruskalResult]:
		"""
		Goodman and Kruskal's gamma ``(C - D) / (C + D)``, ignoring tied pairs.

		Significance: ``t = gamma sqrt((C + D) / (n (1 - gamma^2)))`` against
		Student's t with ``n - 2`` df.
		"""
		op = "goodman_kruskals_gamma"
		pairs = self._paired(first, second, op, Scale.ORDINAL, scale, minimum=3)
		if pairs is None:
			return None
		n = len(pairs)
		concordant, discordant = concordance(pairs.first, pairs.second)
		untied = concordant + discordant
		if untied == 0:
			return self._fail(ErrorKind.DOMAIN, op, "All pairs of observations are tied.")
		gamma = (concordant - discordant) / untied
		if abs(gamma) == 1:
			t = math.copysign(math.inf, gamma)
		else:
			t = gamma * math.sqrt(untied / (n * (1 - gamma * gamma)))
		p = self._student_upper_tail(t, n - 2)
		return GoodmanKruskalResult(
			gamma=gamma, t_statistic=t, p_one_tailed=p, p_two_tailed=2 * p, missings=pairs.missings,
		)

	# --- Regression ---
	def linear_regression(
			self,
			first: Any,
			second: Any,
			scale: Optional[ScaleLike] = None,
	) -> Optional[RegressionResult]:
		"""
		Least squares lines of ``second`` on ``first`` and of ``first`` on ``second``.

		Also reports ``R^2 = r^2``, the adjusted ``1 - (1 - R^2)(n - 1)/(n - 2)``
		(``None`` for ``n <= 2``) and the angle between both lines.

		:param first: Independent variable of the first line.
		:param second: Dependent variable of the first line.
		:param scale: Declared scale of both variables.
		:return: :class:`RegressionResult` or ``None`` on invalid input.
		"""
		op = "linear_regression"
		pairs = self._paired(first, second, op, Scale.INTERVAL, scale)
		if pairs is None:
			return None
		n = len(pairs)
		mean_first = float(np.mean(pairs.first))
		mean_second = float(np.mean(pairs.second))
		dx, dy = _centered(pairs)
		factor = float((dx * dy).sum())
		variance_first = float((dx * dx).sum())
		variance_second = float((dy * dy).sum())
		if variance_first == 0 or variance_second == 0:
			return self._fail(ErrorKind.DOMAIN, op, "Both variables need a variance larger than 0.")

		beta2_first = factor / variance_first
		beta2_second = factor / variance_second
		r = factor / math.sqrt(variance_first * variance_second)
		determination = r * r
		corrected = 1 - (1 - determination) * (n - 1) / (n - 2) if n > 2 else None
		phi = math.degrees(math.acos(max(-1.0, min(1.0, r))))
		if phi > 90:
			phi = 180 - phi
		return RegressionResult(
			regression_first=RegressionLine(beta1=mean_second - beta2_first * mean_first, beta2=beta2_first),
			regression_second=RegressionLine(beta1=mean_first - beta2_second * mean_second, beta2=beta2_second),
			coefficient_of_determination=determination,
			coefficient_of_determination_corrected=corrected,
			correlation_coefficient=r,
			phi=phi,
			missings=pairs.missings,
		)
