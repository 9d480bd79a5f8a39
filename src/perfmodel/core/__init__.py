"""Performance modeling core - aggregation, fitting and confidence scoring."""

from perfmodel.core.aggregate import aggregate_observations
from perfmodel.core.confidence import score_confidence
from perfmodel.core.config import ModelingSettings
from perfmodel.core.errors import IngestError, InsufficientDataError, PerfModelError
from perfmodel.core.fitting import FeatureBasis, FitKind, fit_metric, solve_normal_equations
from perfmodel.core.linearity import detect_linearity
from perfmodel.core.mechanistic import derive_e2e_mean
from perfmodel.core.models import (
    METRIC_NAMES,
    MetricPredictions,
    Observation,
    PredictionMethod,
    PredictionRequest,
    PredictionResult,
    RawBenchmarkRow,
)
from perfmodel.core.predictor import ObservationSource, PerformancePredictor
from perfmodel.core.selector import MethodSelection, select_method

__all__ = [
    "aggregate_observations",
    "score_confidence",
    "ModelingSettings",
    "IngestError",
    "InsufficientDataError",
    "PerfModelError",
    "FeatureBasis",
    "FitKind",
    "fit_metric",
    "solve_normal_equations",
    "detect_linearity",
    "derive_e2e_mean",
    "METRIC_NAMES",
    "MetricPredictions",
    "Observation",
    "PredictionMethod",
    "PredictionRequest",
    "PredictionResult",
    "RawBenchmarkRow",
    "ObservationSource",
    "PerformancePredictor",
    "MethodSelection",
    "select_method",
]
