"""Predict command for performance modeling."""

import json
from pathlib import Path
from typing import Optional

import typer

from perfmodel.core import ModelingSettings, PerformancePredictor
from perfmodel.core.models import (
    METRIC_FAMILIES,
    STATISTICS,
    PredictionMethod,
    PredictionRequest,
    PredictionResult,
)
from perfmodel.database import Database

FAMILY_TITLES = {
    "ttft": "TTFT (ms)",
    "user_tps": "User TPS (tok/s)",
    "e2e": "E2E Latency (ms)",
}


def print_prediction(result: PredictionResult) -> None:
    """Print a prediction table."""
    predictions = result.predictions.model_dump()

    print("┌─────────────────────────────────────────────────────────────┐")
    print("│ PREDICTION                                                  │")
    print("├─────────────────────────────────────────────────────────────┤")
    print(f"│ Model             : {result.model_name:<39} │")
    print(f"│ Input / Output    : {f'{result.input_tokens:g} / {result.output_tokens:g} tokens':<39} │")
    if result.traffic_level is not None:
        print(f"│ Traffic Level     : {result.traffic_level:<39g} │")
    print(f"│ Method            : {result.method:<39} │")
    print(f"│ Confidence        : {result.confidence:<39} │")
    print(f"│ Observations Used : {result.num_observations_used:<39} │")
    print("└─────────────────────────────────────────────────────────────┘")
    print()

    header = "".join(f"{stat:>10}" for stat in STATISTICS)
    print(f"{'Metric':<18}{header}")
    print("─" * (18 + 10 * len(STATISTICS)))
    for family in METRIC_FAMILIES:
        values = "".join(f"{predictions[f'{family}_{stat}']:>10.1f}" for stat in STATISTICS)
        print(f"{FAMILY_TITLES[family]:<18}{values}")
    print()
    print(f"[llm-perfmodel] Job-level throughput: {predictions['throughput']:.1f} tokens/s")


def _require_positive(value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
        raise typer.BadParameter("must be greater than 0")
    return value


def predict_command(
    model: str = typer.Option(
        ...,
        "--model", "-m",
        help="Model name",
    ),
    input_tokens: float = typer.Option(
        ...,
        "--input-tokens", "-i",
        help="Target input tokens",
        callback=_require_positive,
    ),
    output_tokens: float = typer.Option(
        ...,
        "--output-tokens", "-o",
        help="Target output tokens",
        callback=_require_positive,
    ),
    traffic_level: Optional[float] = typer.Option(
        None,
        "--traffic-level", "-t",
        help="QPS or concurrency level (enables 3D regression)",
        callback=_require_positive,
    ),
    method: PredictionMethod = typer.Option(
        PredictionMethod.AUTO_DETECT,
        "--method",
        help="Prediction method",
        case_sensitive=False,
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db",
        help="SQLite database path",
        envvar="DATABASE_PATH",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        help="Output file path (JSON)",
    ),
) -> None:
    """Predict latency and throughput for a model at new token counts.

    Examples:

        # Auto-detect the regression method
        llm-perfmodel predict -m llama-3-8b -i 1024 -o 256

        # Force polynomial regression at a traffic level
        llm-perfmodel predict -m llama-3-8b -i 1024 -o 256 -t 8 --method polynomial
    """
    db = Database(db_path)
    predictor = PerformancePredictor(settings=ModelingSettings.from_env(), source=db)

    request = PredictionRequest(
        model_name=model,
        target_input_tokens=input_tokens,
        target_output_tokens=output_tokens,
        target_traffic_level=traffic_level,
        method=method,
    )
    result = predictor.predict_for_model(request)

    if result is None:
        print(f"[llm-perfmodel] Error: no benchmark data for model '{model}'")
        raise typer.Exit(1)

    print_prediction(result)

    if output:
        with open(output, "w") as f:
            json.dump(result.model_dump(mode="json"), f, indent=2)
        print(f"[llm-perfmodel] Prediction saved to: {output}")
