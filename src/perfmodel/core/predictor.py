"""Performance prediction engine.

Data flow for one request:
1. Raw benchmark rows for the model are aggregated into observations
2. The method selector picks a fitter (possibly overriding the request)
3. The fitter predicts every metric at the target point
4. E2E mean is derived mechanistically when no traffic level is given
5. A confidence label is attached

The predictor holds no state between calls; observations are rebuilt for every
request.
"""

import logging
from typing import Optional, Protocol, Sequence

from perfmodel.core.aggregate import aggregate_observations
from perfmodel.core.confidence import score_confidence
from perfmodel.core.config import ModelingSettings
from perfmodel.core.fitting import FitKind, average_metrics, regress_metrics
from perfmodel.core.models import (
    MetricPredictions,
    Observation,
    PredictionMethod,
    PredictionRequest,
    PredictionResult,
    RawBenchmarkRow,
)
from perfmodel.core.selector import select_method

logger = logging.getLogger(__name__)


class ObservationSource(Protocol):
    """Read-only provider of stored benchmark rows."""

    def fetch_rows(self, model_name: str) -> list[RawBenchmarkRow]:
        ...


class PerformancePredictor:
    """Predict latency/throughput statistics from prior benchmark observations.

    Example:
        >>> predictor = PerformancePredictor(source=database)
        >>> result = predictor.predict_for_model(
        ...     PredictionRequest(model_name="llama-3-8b", target_input_tokens=512,
        ...                       target_output_tokens=256)
        ... )
        >>> print(result.predictions.ttft_p95, result.confidence)
    """

    def __init__(
        self,
        settings: Optional[ModelingSettings] = None,
        source: Optional[ObservationSource] = None,
    ):
        """Initialize predictor.

        Args:
            settings: Modeling thresholds (defaults when omitted).
            source: Storage collaborator used by predict_for_model.
        """
        self.settings = settings or ModelingSettings()
        self.source = source

    def predict_for_model(self, request: PredictionRequest) -> Optional[PredictionResult]:
        """Fetch, aggregate and predict for the request's model.

        Returns:
            PredictionResult, or None when the model has no benchmark data.
        """
        if self.source is None:
            raise ValueError("PerformancePredictor has no observation source configured")

        rows = self.source.fetch_rows(request.model_name)
        observations = aggregate_observations(rows)
        return self.predict(observations, request)

    def predict(
        self,
        observations: Sequence[Observation],
        request: PredictionRequest,
    ) -> Optional[PredictionResult]:
        """Predict metrics at the request's target point.

        Args:
            observations: Aggregated observations for one model.
            request: Target tokens, optional traffic level and method.

        Returns:
            PredictionResult, or None when there are no observations.
        """
        if not observations:
            logger.info(f"No benchmark data for model '{request.model_name}'")
            return None

        selection = select_method(observations, request.method, self.settings)

        if selection.fitter is PredictionMethod.AVERAGE:
            result = self.predict_with_average(observations, request)
        elif selection.fitter is PredictionMethod.POLYNOMIAL:
            result = self.predict_with_polynomial(observations, request)
        else:
            result = self.predict_with_linear(observations, request)

        logger.info(
            f"Predicted '{request.model_name}' at {request.target_input_tokens:g}/"
            f"{request.target_output_tokens:g} tokens with {selection.label} "
            f"({len(observations)} observations, {result.confidence} confidence)"
        )
        return result.model_copy(update={"method": selection.label})

    def predict_with_average(
        self,
        observations: Sequence[Observation],
        request: PredictionRequest,
    ) -> PredictionResult:
        """Average every metric; confidence is always low."""
        return self._build_result(
            request,
            observations,
            average_metrics(observations),
            confidence="low",
            method=PredictionMethod.AVERAGE.value,
        )

    def predict_with_linear(
        self,
        observations: Sequence[Observation],
        request: PredictionRequest,
    ) -> PredictionResult:
        """Multivariate linear regression per metric."""
        predictions = regress_metrics(
            observations,
            FitKind.LINEAR,
            request.target_input_tokens,
            request.target_output_tokens,
            request.target_traffic_level,
            self.settings,
        )
        confidence = score_confidence(
            observations,
            request.target_input_tokens,
            request.target_output_tokens,
            self.settings,
        )
        return self._build_result(
            request, observations, predictions, confidence, PredictionMethod.LINEAR.value
        )

    def predict_with_polynomial(
        self,
        observations: Sequence[Observation],
        request: PredictionRequest,
    ) -> PredictionResult:
        """Quadratic regression with interaction terms per metric.

        Confidence is forced to low below the polynomial observation minimum,
        even though the method selector never routes such sets here.
        """
        predictions = regress_metrics(
            observations,
            FitKind.POLYNOMIAL,
            request.target_input_tokens,
            request.target_output_tokens,
            request.target_traffic_level,
            self.settings,
        )
        confidence = score_confidence(
            observations,
            request.target_input_tokens,
            request.target_output_tokens,
            self.settings,
        )
        if len(observations) < self.settings.min_polynomial_observations:
            confidence = "low"

        return self._build_result(
            request, observations, predictions, confidence, PredictionMethod.POLYNOMIAL.value
        )

    @staticmethod
    def _build_result(
        request: PredictionRequest,
        observations: Sequence[Observation],
        predictions: MetricPredictions,
        confidence: str,
        method: str,
    ) -> PredictionResult:
        return PredictionResult(
            model_name=request.model_name,
            input_tokens=request.target_input_tokens,
            output_tokens=request.target_output_tokens,
            traffic_level=request.target_traffic_level,
            predictions=predictions,
            confidence=confidence,
            num_observations_used=len(observations),
            method=method,
        )
