# src/numstat/inference/results.py

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

__all__ = [
	"BarnardResult", "BinomialTestResult", "SignTestResult",
	"MannWhitneyResult", "ChiSquaredTestResult",
	"CovarianceResult", "CorrelationResult",
	"NormalSignificance", "StudentSignificance", "SpearmanResult",
	"TauSignificance", "KendallResult", "GoodmanKruskalResult",
	"RegressionLine", "RegressionResult", "TTestResult",
]


class _ResultMixin:
	def to_dict(self) -> Dict[str, Any]:
		"""Nested plain-dict view of the result."""
		return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True)
class BarnardResult(_ResultMixin):
	"""Barnard's unconditional test on a 2x2 table."""
	wald: float
	nuisance: float
	p_one_tailed: float
	p_two_tailed: float


@dataclass(frozen=True)
class BinomialTestResult(_ResultMixin):
	"""Tail probabilities for observing ``successes`` out of ``trials``."""
	successes: int
	trials: int
	p_exactly: float
	p_fewer: float
	p_at_most: float
	p_more: float
	p_at_least: float


@dataclass(frozen=True)
class SignTestResult(_ResultMixin):
	positives: int
	trials: int
	p_exactly: float
	p_fewer: float
	p_at_most: float
	p_more: float
	p_at_least: float


@dataclass(frozen=True)
class MannWhitneyResult(_ResultMixin):
	u: float
	z_score: float
	p_one_tailed: float
	p_two_tailed: float


@dataclass(frozen=True)
class ChiSquaredTestResult(_ResultMixin):
	"""Pearson's chi-squared test of independence."""
	statistic: float
	degrees_of_freedom: int
	significance: float


@dataclass(frozen=True)
class CovarianceResult(_ResultMixin):
	covariance: float
	missings: int


@dataclass(frozen=True)
class CorrelationResult(_ResultMixin):
	correlation_coefficient: float
	missings: int


@dataclass(frozen=True)
class NormalSignificance(_ResultMixin):
	z_score: float
	p_one_tailed: float
	p_two_tailed: float


@dataclass(frozen=True)
class StudentSignificance(_ResultMixin):
	degrees_of_freedom: int
	t_statistic: float
	p_one_tailed: float
	p_two_tailed: float


@dataclass(frozen=True)
class SpearmanResult(_ResultMixin):
	"""Spearman's rho with a Fisher-z and a Student's t significance."""
	rho: float
	significance_normal: NormalSignificance
	significance_student: StudentSignificance
	missings: int


@dataclass(frozen=True)
class TauSignificance(_ResultMixin):
	tau: float
	z_score: float
	p_one_tailed: float
	p_two_tailed: float


@dataclass(frozen=True)
class KendallResult(_ResultMixin):
	"""Kendall's tau-a and tau-b with normal significance, and Stuart's tau-c."""
	tau_a: TauSignificance
	tau_b: TauSignificance
	tau_c: float
	missings: int


@dataclass(frozen=True)
class GoodmanKruskalResult(_ResultMixin):
	gamma: float
	t_statistic: float
	p_one_tailed: float
	p_two_tailed: float
	missings: int


@dataclass(frozen=True)
class RegressionLine(_ResultMixin):
	"""``y = beta1 + beta2 * x``"""
	beta1: float
	beta2: float

	def predict(self, x: float) -> float:
		return self.beta1 + self.beta2 * x


@dataclass(frozen=True)
class RegressionResult(_ResultMixin):
	"""
	Simple linear regression in both directions.

	:param regression_first: Second variable regressed on the first.
	:param regression_second: First variable regressed on the second.
	:param phi: Angle between the two regression lines in degrees (``0 .. 90``).
	"""
	regression_first: RegressionLine
	regression_second: RegressionLine
	coefficient_of_determination: float
	coefficient_of_determination_corrected: Optional[float]
	correlation_coefficient: float
	phi: float
	missings: int


@dataclass(frozen=True)
class TTestResult(_ResultMixin):
	t_statistic: float
	degrees_of_freedom: int
	p_one_sided: float
	p_two_sided: float
	missings: int = 0
