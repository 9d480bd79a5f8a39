"""Mechanistic E2E latency derivation.

E2E = TTFT + output_tokens / TPS, the prefill-then-decode model of
autoregressive generation. Used for the mean only; E2E stdev and percentiles
stay with regression because they carry queuing and tail effects.
"""

import math
from typing import Optional


def safe_divide(numerator: float, denominator: Optional[float], fallback: float = 0.0) -> float:
    """Divide, returning fallback for absent, non-positive or non-finite denominators."""
    if denominator is None or not math.isfinite(denominator) or denominator <= 0:
        return fallback
    result = numerator / denominator
    return result if math.isfinite(result) else fallback


def derive_e2e_mean(
    ttft_mean_ms: float,
    user_tps_mean: Optional[float],
    output_tokens: float,
    fallback_ms_per_token: float = 10.0,
) -> float:
    """Compute mean E2E latency (ms) from TTFT (ms) and per-user tokens/sec.

    Args:
        ttft_mean_ms: Predicted mean time to first token (ms).
        user_tps_mean: Predicted mean per-user generation rate (tokens/sec).
        output_tokens: Target output tokens.
        fallback_ms_per_token: Generation time per token used when the rate
            is unusable (10 ms/token = 100 tok/s).

    Returns:
        ttft_mean_ms + output_tokens / user_tps_mean * 1000.
    """
    fallback_generation_ms = output_tokens * fallback_ms_per_token
    generation_s = safe_divide(output_tokens, user_tps_mean, fallback=fallback_generation_ms / 1000)

    e2e_mean = ttft_mean_ms + generation_s * 1000
    if not math.isfinite(e2e_mean) or e2e_mean < 0:
        e2e_mean = ttft_mean_ms + fallback_generation_ms
    return e2e_mean
