"""Common test fixtures for LLM performance modeler tests."""

from typing import Callable, Optional

import pytest

from perfmodel.core.models import Observation, RawBenchmarkRow
from perfmodel.database import Database


# ============================================================
# Observation Fixtures
# ============================================================


def make_observation(
    input_tokens: float,
    output_tokens: float,
    traffic_level: Optional[float] = None,
    **metrics: float,
) -> Observation:
    """Build an observation; unspecified metrics are 0."""
    return Observation(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        traffic_level=traffic_level,
        **metrics,
    )


@pytest.fixture
def observation_factory() -> Callable[..., Observation]:
    """Factory for observations."""
    return make_observation


@pytest.fixture
def plane_observations() -> list[Observation]:
    """TTFT lying exactly on the plane 5 + 2*input + 3*output over a 3x3 grid."""
    return [
        make_observation(
            x,
            z,
            ttft_mean=5 + 2 * x + 3 * z,
            user_tps_mean=50.0,
            throughput=1000.0,
        )
        for x in (100.0, 200.0, 300.0)
        for z in (50.0, 100.0, 200.0)
    ]


@pytest.fixture
def bowl_observations() -> list[Observation]:
    """TTFT on the symmetric bowl (input² + output²), which no plane can explain."""
    return [
        make_observation(x, z, ttft_mean=x * x + z * z)
        for x in (-1.0, 0.0, 1.0)
        for z in (-1.0, 0.0, 1.0)
    ]


@pytest.fixture
def cube_observations() -> list[Observation]:
    """Centered 3x3x3 grid over input, output and traffic.

    TTFT falls with input (5 - input) and E2E is a flat 1000 ms, so every
    quadratic-with-traffic coefficient is recovered exactly.
    """
    return [
        make_observation(x, z, traffic_level=t, ttft_mean=5.0 - x, e2e_mean=1000.0)
        for x in (-1.0, 0.0, 1.0)
        for z in (-1.0, 0.0, 1.0)
        for t in (-1.0, 0.0, 1.0)
    ]


@pytest.fixture
def sparse_observations() -> list[Observation]:
    """Three observations spread across the input/output range."""
    return [
        make_observation(100.0, 50.0, ttft_mean=100.0, user_tps_mean=50.0),
        make_observation(200.0, 100.0, ttft_mean=200.0, user_tps_mean=40.0),
        make_observation(300.0, 200.0, ttft_mean=300.0, user_tps_mean=30.0),
    ]


# ============================================================
# Raw Row Fixtures
# ============================================================


def make_row(
    benchmark_id: str = "bench-1",
    provider_model: str = "llama-3-8b",
    input_avg_len: float = 100.0,
    output_avg_len: float = 50.0,
    traffic_level: Optional[float] = None,
    **metrics: Optional[float],
) -> RawBenchmarkRow:
    """Build a raw benchmark row."""
    return RawBenchmarkRow(
        benchmark_id=benchmark_id,
        provider_model=provider_model,
        input_avg_len=input_avg_len,
        output_avg_len=output_avg_len,
        traffic_level=traffic_level,
        **metrics,
    )


@pytest.fixture
def row_factory() -> Callable[..., RawBenchmarkRow]:
    """Factory for raw benchmark rows."""
    return make_row


# ============================================================
# Storage Fixtures
# ============================================================


@pytest.fixture
def sample_csv() -> str:
    """Benchmark CSV covering three token configurations."""
    return (
        "provider_name,provider_model,traffic_mode,traffic_level,"
        "input_avg_len,output_avg_len,ttft_mean,ttft_p05,ttft_p95,"
        "user_tps_mean,e2e_mean,e2e_p80,summary_job_level_tps,ttft_distribution\n"
        "vllm,llama-3-8b,concurrency,1,100,50,100,80,150,50,1100,1200,500,\"[1,2,3]\"\n"
        "vllm,llama-3-8b,concurrency,1,200,100,200,160,250,40,2700,2900,450,\"[1,2,3]\"\n"
        "vllm,llama-3-8b,concurrency,1,300,200,300,240,350,30,6950,7100,400,\"[1,2,3]\"\n"
    )


@pytest.fixture
def temp_db(tmp_path) -> Database:
    """Database in a temporary directory."""
    return Database(str(tmp_path / "data" / "benchmarks.db"))
