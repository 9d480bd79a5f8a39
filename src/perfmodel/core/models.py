"""Data models for LLM performance modeling."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Metric Names
# ============================================================

METRIC_FAMILIES = ("ttft", "user_tps", "e2e")
STATISTICS = ("mean", "stdev", "p05", "p50", "p80", "p95", "p99", "p999")

LATENCY_METRICS = [f"{family}_{stat}" for family in METRIC_FAMILIES for stat in STATISTICS]

# 24 per-family statistics followed by job-level throughput
METRIC_NAMES = LATENCY_METRICS + ["throughput"]

Confidence = Literal["high", "medium", "low"]


class PredictionMethod(str, Enum):
    """Prediction methods accepted from callers."""

    AUTO_DETECT = "auto_detect"
    POLYNOMIAL = "polynomial"
    LINEAR = "linear"
    AVERAGE = "average"


# ============================================================
# Benchmark Data Models
# ============================================================


class RawBenchmarkRow(BaseModel):
    """A single stored benchmark run, as read from the benchmark table.

    Statistic columns are optional because uploaded CSVs frequently omit some
    percentiles; missing values are read as 0 when building observations.
    """

    benchmark_id: str = Field(description="Upload batch identifier")
    provider_model: str = Field(description="Model name")
    input_avg_len: float = Field(description="Average input tokens")
    output_avg_len: float = Field(description="Average output tokens")
    traffic_level: Optional[float] = Field(default=None, description="QPS or concurrency level")

    ttft_mean: Optional[float] = None
    ttft_stdev: Optional[float] = None
    ttft_p05: Optional[float] = None
    ttft_p50: Optional[float] = None
    ttft_p80: Optional[float] = None
    ttft_p95: Optional[float] = None
    ttft_p99: Optional[float] = None
    ttft_p999: Optional[float] = None

    user_tps_mean: Optional[float] = None
    user_tps_stdev: Optional[float] = None
    user_tps_p05: Optional[float] = None
    user_tps_p50: Optional[float] = None
    user_tps_p80: Optional[float] = None
    user_tps_p95: Optional[float] = None
    user_tps_p99: Optional[float] = None
    user_tps_p999: Optional[float] = None

    e2e_mean: Optional[float] = None
    e2e_stdev: Optional[float] = None
    e2e_p05: Optional[float] = None
    e2e_p50: Optional[float] = None
    e2e_p80: Optional[float] = None
    e2e_p95: Optional[float] = None
    e2e_p99: Optional[float] = None
    e2e_p999: Optional[float] = None

    summary_job_level_tps: Optional[float] = Field(
        default=None, description="Job-level throughput (tokens/sec)"
    )

    def metric_value(self, metric: str) -> float:
        """Return a metric column, treating missing values as 0."""
        column = "summary_job_level_tps" if metric == "throughput" else metric
        value = getattr(self, column)
        return float(value) if value is not None else 0.0


class MetricStatistics(BaseModel):
    """TTFT (ms), user TPS (tok/s), E2E (ms) statistics and job throughput."""

    ttft_mean: float = Field(default=0.0, description="Mean TTFT (ms)")
    ttft_stdev: float = Field(default=0.0, description="TTFT standard deviation (ms)")
    ttft_p05: float = Field(default=0.0, description="5th percentile TTFT (ms)")
    ttft_p50: float = Field(default=0.0, description="50th percentile TTFT (ms)")
    ttft_p80: float = Field(default=0.0, description="80th percentile TTFT (ms)")
    ttft_p95: float = Field(default=0.0, description="95th percentile TTFT (ms)")
    ttft_p99: float = Field(default=0.0, description="99th percentile TTFT (ms)")
    ttft_p999: float = Field(default=0.0, description="99.9th percentile TTFT (ms)")

    user_tps_mean: float = Field(default=0.0, description="Mean per-user tokens/sec")
    user_tps_stdev: float = Field(default=0.0, description="Per-user tokens/sec std deviation")
    user_tps_p05: float = Field(default=0.0, description="5th percentile per-user tokens/sec")
    user_tps_p50: float = Field(default=0.0, description="50th percentile per-user tokens/sec")
    user_tps_p80: float = Field(default=0.0, description="80th percentile per-user tokens/sec")
    user_tps_p95: float = Field(default=0.0, description="95th percentile per-user tokens/sec")
    user_tps_p99: float = Field(default=0.0, description="99th percentile per-user tokens/sec")
    user_tps_p999: float = Field(default=0.0, description="99.9th percentile per-user tokens/sec")

    e2e_mean: float = Field(default=0.0, description="Mean E2E latency (ms)")
    e2e_stdev: float = Field(default=0.0, description="E2E latency std deviation (ms)")
    e2e_p05: float = Field(default=0.0, description="5th percentile E2E latency (ms)")
    e2e_p50: float = Field(default=0.0, description="50th percentile E2E latency (ms)")
    e2e_p80: float = Field(default=0.0, description="80th percentile E2E latency (ms)")
    e2e_p95: float = Field(default=0.0, description="95th percentile E2E latency (ms)")
    e2e_p99: float = Field(default=0.0, description="99th percentile E2E latency (ms)")
    e2e_p999: float = Field(default=0.0, description="99.9th percentile E2E latency (ms)")

    throughput: float = Field(default=0.0, description="Job-level throughput (tokens/sec)")


class Observation(MetricStatistics):
    """One averaged benchmark data point at (input, output, traffic level)."""

    model_config = ConfigDict(frozen=True)

    input_tokens: float = Field(description="Average input tokens")
    output_tokens: float = Field(description="Average output tokens")
    traffic_level: Optional[float] = Field(default=None, description="QPS or concurrency level")


class MetricPredictions(MetricStatistics):
    """Predicted statistics at the requested token counts."""


# ============================================================
# Prediction Request / Result
# ============================================================


class PredictionRequest(BaseModel):
    """Prediction request for a model at a target operating point."""

    model_name: str = Field(description="Model name to predict for")
    target_input_tokens: float = Field(gt=0, description="Target input tokens")
    target_output_tokens: float = Field(gt=0, description="Target output tokens")
    target_traffic_level: Optional[float] = Field(
        default=None, description="Optional QPS or concurrency level"
    )
    method: PredictionMethod = Field(
        default=PredictionMethod.AUTO_DETECT, description="Requested prediction method"
    )


class PredictionResult(BaseModel):
    """Prediction result returned to presentation layers."""

    model_name: str = Field(description="Model name")
    input_tokens: float = Field(description="Requested input tokens")
    output_tokens: float = Field(description="Requested output tokens")
    traffic_level: Optional[float] = Field(default=None, description="Requested traffic level")
    predictions: MetricPredictions = Field(description="Predicted statistics")
    confidence: Confidence = Field(description="Prediction confidence")
    num_observations_used: int = Field(description="Observations used for fitting")
    method: str = Field(description="Resolved prediction method")


# ============================================================
# Storage Summaries
# ============================================================


class ModelSummary(BaseModel):
    """Benchmark coverage for one model."""

    provider_model: str = Field(description="Model name")
    num_benchmarks: int = Field(description="Distinct uploaded benchmarks")
    num_runs: int = Field(description="Stored benchmark rows")
    input_token_min: float = Field(description="Smallest average input length")
    input_token_max: float = Field(description="Largest average input length")
    output_token_min: float = Field(description="Smallest average output length")
    output_token_max: float = Field(description="Largest average output length")


class BenchmarkSummary(BaseModel):
    """One uploaded benchmark for a model."""

    benchmark_id: str = Field(description="Upload batch identifier")
    upload_date: str = Field(description="Upload timestamp (ISO 8601)")
    provider_model: str = Field(description="Model name")
    num_runs: int = Field(description="Rows in this benchmark")
    avg_input_tokens: float = Field(description="Average input tokens across rows")
    avg_output_tokens: float = Field(description="Average output tokens across rows")


class UploadResult(BaseModel):
    """Outcome of a benchmark CSV upload."""

    benchmark_id: str = Field(description="Assigned benchmark identifier")
    rows_inserted: int = Field(description="Number of rows stored")
