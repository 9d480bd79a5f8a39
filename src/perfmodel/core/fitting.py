"""Regression fitters for benchmark observations.

Three strategies are supported:
1. Simple averaging (ignores the target point)
2. Multivariate linear regression: y = a + b*input + c*output [+ d*traffic]
3. Polynomial regression with interactions:
   y = a + b*x1 + c*x2 + d*x1² + e*x2² + f*x1*x2 (plus traffic terms in 3D)

Every metric is fit independently. The 2D linear fit is solved in closed form;
all other fits share one Gauss-Seidel solver over the normal equations.

Known limitation: the Gauss-Seidel solver runs a fixed number of sweeps with no
convergence check. For ill-conditioned feature sets (raw token counts squared,
nearly collinear input/output lengths) the coefficients are an approximation of
the least-squares solution. Predictions are clamped and used as point estimates.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from perfmodel.core.config import ModelingSettings
from perfmodel.core.mechanistic import derive_e2e_mean
from perfmodel.core.models import METRIC_NAMES, MetricPredictions, Observation


class FitKind(str, Enum):
    """Regression family."""

    LINEAR = "linear"
    POLYNOMIAL = "polynomial"


class FeatureBasis(str, Enum):
    """Feature vector construction for a regression."""

    LINEAR_2D = "linear_2d"  # [1, x1, x2]
    LINEAR_3D = "linear_3d"  # [1, x1, x2, x3]
    QUADRATIC_2D = "quadratic_2d"  # [1, x1, x2, x1², x2², x1x2]
    QUADRATIC_3D = "quadratic_3d"  # [1, x1, x2, x3, x1², x2², x3², x1x2, x1x3, x2x3]

    @property
    def uses_traffic(self) -> bool:
        return self in (FeatureBasis.LINEAR_3D, FeatureBasis.QUADRATIC_3D)

    def expand(self, x1: float, x2: float, x3: float = 0.0) -> list[float]:
        """Build the feature row for input tokens x1, output tokens x2, traffic x3."""
        if self is FeatureBasis.LINEAR_2D:
            return [1.0, x1, x2]
        if self is FeatureBasis.LINEAR_3D:
            return [1.0, x1, x2, x3]
        if self is FeatureBasis.QUADRATIC_2D:
            return [1.0, x1, x2, x1 * x1, x2 * x2, x1 * x2]
        return [1.0, x1, x2, x3, x1 * x1, x2 * x2, x3 * x3, x1 * x2, x1 * x3, x2 * x3]

    @classmethod
    def for_fit(cls, kind: FitKind, use_traffic: bool) -> "FeatureBasis":
        if kind is FitKind.LINEAR:
            return cls.LINEAR_3D if use_traffic else cls.LINEAR_2D
        return cls.QUADRATIC_3D if use_traffic else cls.QUADRATIC_2D


@dataclass(frozen=True)
class FittedModel:
    """Coefficients of one fitted metric, aligned with its feature basis."""

    basis: FeatureBasis
    coefficients: tuple[float, ...]

    def evaluate(
        self,
        input_tokens: float,
        output_tokens: float,
        traffic_level: Optional[float] = None,
    ) -> float:
        """Evaluate the fitted surface (unclamped)."""
        features = self.basis.expand(input_tokens, output_tokens, traffic_level or 0.0)
        return float(sum(c * f for c, f in zip(self.coefficients, features)))


def clamp_non_negative(value: float) -> float:
    """Clamp a prediction to [0, inf); non-finite values become 0."""
    if not math.isfinite(value):
        return 0.0
    return max(0.0, value)


def solve_normal_equations(
    design: np.ndarray,
    targets: np.ndarray,
    iterations: int = 100,
    epsilon: float = 1e-10,
) -> np.ndarray:
    """Approximate least squares via Gauss-Seidel on XᵀX·β = Xᵀy.

    Coefficients start at zero and are updated in place for a fixed number of
    sweeps. A coefficient whose diagonal term is below epsilon is left as is.

    Args:
        design: Design matrix X (n_observations x n_features).
        targets: Target vector y (n_observations).
        iterations: Number of full sweeps.
        epsilon: Minimum diagonal magnitude for an update.

    Returns:
        Coefficient vector of length n_features.
    """
    xtx = design.T @ design
    xty = design.T @ targets
    size = xtx.shape[0]
    coeffs = np.zeros(size)

    for _ in range(iterations):
        for i in range(size):
            diagonal = xtx[i, i]
            if abs(diagonal) <= epsilon:
                continue
            off_diagonal = float(xtx[i] @ coeffs) - diagonal * coeffs[i]
            coeffs[i] = (xty[i] - off_diagonal) / diagonal

    return coeffs


def fit_linear_2d(
    inputs: Sequence[float],
    outputs: Sequence[float],
    targets: Sequence[float],
    epsilon: float = 1e-10,
) -> FittedModel:
    """Closed-form fit of y = a + b*input + c*output.

    Solves the 2x2 covariance system. When the system is singular each feature
    is regressed on its own, with a zero coefficient for a constant feature.
    """
    x1 = np.asarray(inputs, dtype=float)
    x2 = np.asarray(outputs, dtype=float)
    y = np.asarray(targets, dtype=float)

    mean_x1, mean_x2, mean_y = x1.mean(), x2.mean(), y.mean()
    dx1, dx2, dy = x1 - mean_x1, x2 - mean_x2, y - mean_y

    var_x1 = float(dx1 @ dx1)
    var_x2 = float(dx2 @ dx2)
    cov_x1x2 = float(dx1 @ dx2)
    cov_x1y = float(dx1 @ dy)
    cov_x2y = float(dx2 @ dy)

    determinant = var_x1 * var_x2 - cov_x1x2 * cov_x1x2

    if abs(determinant) > epsilon:
        input_coeff = (cov_x1y * var_x2 - cov_x2y * cov_x1x2) / determinant
        output_coeff = (cov_x2y * var_x1 - cov_x1y * cov_x1x2) / determinant
    else:
        input_coeff = cov_x1y / var_x1 if var_x1 > 0 else 0.0
        output_coeff = cov_x2y / var_x2 if var_x2 > 0 else 0.0

    intercept = float(mean_y - input_coeff * mean_x1 - output_coeff * mean_x2)
    return FittedModel(FeatureBasis.LINEAR_2D, (intercept, input_coeff, output_coeff))


def _traffic(observation: Observation, settings: ModelingSettings) -> float:
    if observation.traffic_level is None:
        return settings.default_traffic_level
    return observation.traffic_level


def fit_metric(
    observations: Sequence[Observation],
    metric: str,
    kind: FitKind,
    use_traffic: bool = False,
    settings: Optional[ModelingSettings] = None,
) -> FittedModel:
    """Fit one metric against input/output tokens (and traffic level when requested).

    Args:
        observations: Aggregated observations (at least one).
        metric: Metric name from METRIC_NAMES.
        kind: Linear or polynomial regression.
        use_traffic: Include traffic level as a third feature.
        settings: Solver settings.

    Returns:
        FittedModel with coefficients for the chosen basis.
    """
    settings = settings or ModelingSettings()
    basis = FeatureBasis.for_fit(kind, use_traffic)
    targets = [getattr(obs, metric) for obs in observations]

    if basis is FeatureBasis.LINEAR_2D:
        return fit_linear_2d(
            [obs.input_tokens for obs in observations],
            [obs.output_tokens for obs in observations],
            targets,
            epsilon=settings.singular_epsilon,
        )

    design = np.array(
        [
            basis.expand(obs.input_tokens, obs.output_tokens, _traffic(obs, settings))
            for obs in observations
        ],
        dtype=float,
    )
    coeffs = solve_normal_equations(
        design,
        np.asarray(targets, dtype=float),
        iterations=settings.solver_iterations,
        epsilon=settings.singular_epsilon,
    )
    return FittedModel(basis, tuple(float(c) for c in coeffs))


def average_metrics(observations: Sequence[Observation]) -> MetricPredictions:
    """Arithmetic mean of every metric across observations."""
    values = {
        metric: clamp_non_negative(float(np.mean([getattr(obs, metric) for obs in observations])))
        for metric in METRIC_NAMES
    }
    return MetricPredictions(**values)


def regress_metrics(
    observations: Sequence[Observation],
    kind: FitKind,
    target_input: float,
    target_output: float,
    target_traffic: Optional[float] = None,
    settings: Optional[ModelingSettings] = None,
) -> MetricPredictions:
    """Fit and evaluate every metric at the target point.

    With a traffic level all metrics, E2E mean included, use 3-feature fits.
    Without one, 2-feature fits are used and E2E mean is derived from the
    predicted TTFT and user TPS.
    """
    settings = settings or ModelingSettings()
    use_traffic = target_traffic is not None

    values = {}
    for metric in METRIC_NAMES:
        if metric == "e2e_mean" and not use_traffic:
            continue
        model = fit_metric(observations, metric, kind, use_traffic, settings)
        values[metric] = clamp_non_negative(
            model.evaluate(target_input, target_output, target_traffic)
        )

    if not use_traffic:
        values["e2e_mean"] = clamp_non_negative(
            derive_e2e_mean(
                values["ttft_mean"],
                values["user_tps_mean"],
                target_output,
                fallback_ms_per_token=settings.fallback_ms_per_output_token,
            )
        )

    return MetricPredictions(**values)
