"""Prediction method selection with graceful downgrades."""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from perfmodel.core.config import ModelingSettings
from perfmodel.core.linearity import detect_linearity
from perfmodel.core.models import Observation, PredictionMethod

logger = logging.getLogger(__name__)

AUTO_LABELS = {
    PredictionMethod.AVERAGE: "auto_simple_average",
    PredictionMethod.LINEAR: "auto_linear",
    PredictionMethod.POLYNOMIAL: "auto_polynomial",
}


@dataclass(frozen=True)
class MethodSelection:
    """Fitter to run and the method name reported to callers."""

    fitter: PredictionMethod
    label: str
    requested: PredictionMethod

    @property
    def downgraded(self) -> bool:
        """True when an explicit request could not be honored."""
        return self.requested is not PredictionMethod.AUTO_DETECT and self.fitter is not self.requested


def _nearest_token(value: float) -> int:
    return math.floor(value + 0.5)


def has_token_variation(observations: Sequence[Observation]) -> bool:
    """True when rounded input or output token counts take at least 2 values.

    Halves round up, so 99.5 and 100.5 are 100 and 101.
    """
    unique_inputs = {_nearest_token(obs.input_tokens) for obs in observations}
    unique_outputs = {_nearest_token(obs.output_tokens) for obs in observations}
    return len(unique_inputs) >= 2 or len(unique_outputs) >= 2


def _resolve(
    observations: Sequence[Observation],
    requested: PredictionMethod,
    settings: ModelingSettings,
) -> PredictionMethod:
    count = len(observations)

    if count == 1 or not has_token_variation(observations):
        return PredictionMethod.AVERAGE

    if count < settings.min_polynomial_observations and requested is PredictionMethod.POLYNOMIAL:
        return PredictionMethod.LINEAR

    if requested is PredictionMethod.AUTO_DETECT:
        if count < settings.min_polynomial_observations:
            return PredictionMethod.LINEAR
        report = detect_linearity(observations, settings)
        return PredictionMethod.LINEAR if report.is_linear else PredictionMethod.POLYNOMIAL

    return requested


def select_method(
    observations: Sequence[Observation],
    requested: PredictionMethod = PredictionMethod.AUTO_DETECT,
    settings: Optional[ModelingSettings] = None,
) -> MethodSelection:
    """Choose the fitting strategy the data can support.

    Rules, in order:
    1. One observation, or no variation in input and output tokens: average.
    2. Fewer than 3 observations and polynomial requested: linear.
    3. Auto-detect: linear below 3 observations, else the linearity detector.
    4. Otherwise the requested method.

    Args:
        observations: Non-empty observation list.
        requested: Caller's requested method.
        settings: Thresholds.

    Returns:
        MethodSelection naming the fitter and reported label.
    """
    settings = settings or ModelingSettings()
    requested = PredictionMethod(requested)
    fitter = _resolve(observations, requested, settings)

    if requested is PredictionMethod.AUTO_DETECT:
        label = AUTO_LABELS[fitter]
    else:
        label = fitter.value

    selection = MethodSelection(fitter=fitter, label=label, requested=requested)
    if selection.downgraded:
        logger.info(
            f"Requested method '{requested.value}' downgraded to '{fitter.value}' "
            f"({len(observations)} observations)"
        )
    return selection
