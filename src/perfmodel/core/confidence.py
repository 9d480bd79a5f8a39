"""Prediction confidence scoring."""

import math
from typing import Optional, Sequence

from perfmodel.core.config import ModelingSettings
from perfmodel.core.models import Confidence, Observation


def _normalized_gap(value: float, target: float, span: float) -> float:
    if span <= 0 or not math.isfinite(span):
        return 0.0
    gap = abs(value - target) / span
    return gap if math.isfinite(gap) else 0.0


def nearest_distance(
    observations: Sequence[Observation],
    target_input: float,
    target_output: float,
) -> float:
    """Smallest range-normalized Euclidean distance from the target to an observation."""
    inputs = [obs.input_tokens for obs in observations]
    outputs = [obs.output_tokens for obs in observations]
    input_span = max(inputs) - min(inputs)
    output_span = max(outputs) - min(outputs)

    return min(
        math.sqrt(
            _normalized_gap(obs.input_tokens, target_input, input_span) ** 2
            + _normalized_gap(obs.output_tokens, target_output, output_span) ** 2
        )
        for obs in observations
    )


def is_extrapolating(
    observations: Sequence[Observation],
    target_input: float,
    target_output: float,
) -> bool:
    """True when the target lies outside the observed input/output envelope."""
    inputs = [obs.input_tokens for obs in observations]
    outputs = [obs.output_tokens for obs in observations]
    return (
        target_input < min(inputs)
        or target_input > max(inputs)
        or target_output < min(outputs)
        or target_output > max(outputs)
    )


def score_confidence(
    observations: Sequence[Observation],
    target_input: float,
    target_output: float,
    settings: Optional[ModelingSettings] = None,
) -> Confidence:
    """Rate how well the observations support a prediction at the target.

    Args:
        observations: Non-empty list of observations.
        target_input: Target input tokens.
        target_output: Target output tokens.
        settings: Distance thresholds.

    Returns:
        'high' when close to an observation and interpolating, 'medium' when
        moderately close or interpolating, otherwise 'low'.
    """
    settings = settings or ModelingSettings()
    distance = nearest_distance(observations, target_input, target_output)
    extrapolating = is_extrapolating(observations, target_input, target_output)

    if distance < settings.high_confidence_distance and not extrapolating:
        return "high"
    if distance < settings.medium_confidence_distance or not extrapolating:
        return "medium"
    return "low"
