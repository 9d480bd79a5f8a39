"""Linear vs. polynomial model detection for auto-detect mode."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from perfmodel.core.config import ModelingSettings
from perfmodel.core.fitting import FitKind, fit_metric
from perfmodel.core.models import Observation

logger = logging.getLogger(__name__)

REPRESENTATIVE_METRIC = "ttft_mean"


def r_squared(
    observations: Sequence[Observation],
    metric: str,
    kind: FitKind,
    settings: Optional[ModelingSettings] = None,
) -> float:
    """Coefficient of determination of a 2-feature fit, clamped to >= 0.

    Returns 0 with fewer than 2 observations or when the metric is constant.
    """
    n = len(observations)
    if n < 2:
        return 0.0

    actual = [getattr(obs, metric) for obs in observations]
    mean = sum(actual) / n
    model = fit_metric(observations, metric, kind, use_traffic=False, settings=settings)
    predicted = [model.evaluate(obs.input_tokens, obs.output_tokens) for obs in observations]

    ss_res = sum((y - y_hat) ** 2 for y, y_hat in zip(actual, predicted))
    ss_tot = sum((y - mean) ** 2 for y in actual)

    if ss_tot == 0:
        return 0.0
    return max(0.0, 1 - ss_res / ss_tot)


@dataclass(frozen=True)
class LinearityReport:
    """Goodness-of-fit comparison between linear and polynomial models."""

    linear_r2: float
    polynomial_r2: float
    is_linear: bool

    @property
    def improvement(self) -> float:
        return self.polynomial_r2 - self.linear_r2


def detect_linearity(
    observations: Sequence[Observation],
    settings: Optional[ModelingSettings] = None,
    metric: str = REPRESENTATIVE_METRIC,
) -> LinearityReport:
    """Decide whether a linear model explains the data about as well as a polynomial.

    Linear wins when the polynomial R² gain is below the improvement threshold
    or the linear R² alone exceeds the R² threshold.
    """
    settings = settings or ModelingSettings()
    linear_r2 = r_squared(observations, metric, FitKind.LINEAR, settings)
    polynomial_r2 = r_squared(observations, metric, FitKind.POLYNOMIAL, settings)

    is_linear = (
        polynomial_r2 - linear_r2 < settings.linearity_min_improvement
        or linear_r2 > settings.linearity_r2_threshold
    )
    logger.debug(
        f"Linearity check on {metric}: linear R²={linear_r2:.4f}, "
        f"polynomial R²={polynomial_r2:.4f}, linear={is_linear}"
    )
    return LinearityReport(linear_r2=linear_r2, polynomial_r2=polynomial_r2, is_linear=is_linear)
