"""Database module for storing benchmark rows."""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable, Optional

from perfmodel.core.models import (
    LATENCY_METRICS,
    BenchmarkSummary,
    ModelSummary,
    RawBenchmarkRow,
)

DEFAULT_DB_PATH = "./data/benchmarks.db"

# Columns accepted from uploaded CSVs, in table order
TEXT_COLUMNS = ["provider_name", "provider_model", "traffic_mode"]
NUMERIC_COLUMNS = [
    "traffic_level",
    "input_avg_len",
    "input_stdev_len",
    "input_min_len",
    "input_max_len",
    "input_total_tokens",
    "output_avg_len",
    "output_stdev_len",
    "output_min_len",
    "output_max_len",
    "output_total_tokens",
    *LATENCY_METRICS,
    "summary_total_num_requests",
    "summary_total_elapsed_time_s",
    "summary_job_level_tps",
    "summary_actual_qps",
    "summary_num_failed_requests",
    "per_gpu_num_gpus",
    "acceptance_rate",
]
DATA_COLUMNS = TEXT_COLUMNS + NUMERIC_COLUMNS

_METRIC_COLUMN_DDL = ",\n".join(f"                    {name} REAL" for name in LATENCY_METRICS)


def get_db_path_from_env() -> str:
    """Get database path from DATABASE_PATH environment variable."""
    return os.getenv("DATABASE_PATH", DEFAULT_DB_PATH)


class Database:
    """SQLite database for benchmark rows."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = Path(db_path or get_db_path_from_env())
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS benchmarks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    benchmark_id TEXT NOT NULL,
                    upload_date TEXT NOT NULL,
                    provider_name TEXT,
                    provider_model TEXT NOT NULL,
                    traffic_mode TEXT,
                    traffic_level REAL,
                    input_avg_len REAL NOT NULL,
                    input_stdev_len REAL,
                    input_min_len INTEGER,
                    input_max_len INTEGER,
                    input_total_tokens INTEGER,
                    output_avg_len REAL NOT NULL,
                    output_stdev_len REAL,
                    output_min_len INTEGER,
                    output_max_len INTEGER,
                    output_total_tokens INTEGER,
{_METRIC_COLUMN_DDL},
                    summary_total_num_requests INTEGER,
                    summary_total_elapsed_time_s REAL,
                    summary_job_level_tps REAL,
                    summary_actual_qps REAL,
                    summary_num_failed_requests INTEGER,
                    per_gpu_num_gpus INTEGER,
                    acceptance_rate REAL
                )
            """)

            # Index on model for per-model prediction queries
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_benchmarks_provider_model
                ON benchmarks(provider_model)
            """)

            # Index on benchmark_id for lookup and delete
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_benchmarks_benchmark_id
                ON benchmarks(benchmark_id)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def insert_rows(
        self,
        benchmark_id: str,
        upload_date: str,
        rows: Iterable[dict[str, Any]],
    ) -> int:
        """Insert parsed benchmark rows under one benchmark id.

        Args:
            benchmark_id: Identifier shared by every row of the upload.
            upload_date: ISO 8601 upload timestamp.
            rows: Dicts keyed by DATA_COLUMNS (missing keys are stored as NULL).

        Returns:
            Number of rows inserted.
        """
        columns = ["benchmark_id", "upload_date", *DATA_COLUMNS]
        placeholders = ", ".join("?" for _ in columns)
        values = [
            (benchmark_id, upload_date, *(row.get(name) for name in DATA_COLUMNS))
            for row in rows
        ]

        with self._get_connection() as conn:
            conn.executemany(
                f"INSERT INTO benchmarks ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
            conn.commit()
        return len(values)

    def fetch_rows(self, model_name: str) -> list[RawBenchmarkRow]:
        """Get all benchmark rows for a model, for aggregation by the predictor."""
        columns = [
            "benchmark_id",
            "provider_model",
            "input_avg_len",
            "output_avg_len",
            "traffic_level",
            *LATENCY_METRICS,
            "summary_job_level_tps",
        ]
        with self._get_connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {', '.join(columns)}
                FROM benchmarks
                WHERE provider_model = ?
                ORDER BY input_avg_len, output_avg_len, traffic_level
                """,
                (model_name,),
            ).fetchall()

            return [RawBenchmarkRow(**dict(row)) for row in rows]

    def list_models(self) -> list[ModelSummary]:
        """Summarize benchmark coverage per model."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT
                    provider_model,
                    COUNT(DISTINCT benchmark_id) AS num_benchmarks,
                    COUNT(*) AS num_runs,
                    MIN(input_avg_len) AS input_token_min,
                    MAX(input_avg_len) AS input_token_max,
                    MIN(output_avg_len) AS output_token_min,
                    MAX(output_avg_len) AS output_token_max
                FROM benchmarks
                GROUP BY provider_model
                ORDER BY provider_model
                """
            ).fetchall()

            return [ModelSummary(**dict(row)) for row in rows]

    def list_model_names(self) -> list[str]:
        """List every model that has benchmark data."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT DISTINCT provider_model FROM benchmarks ORDER BY provider_model"
            ).fetchall()

            return [row["provider_model"] for row in rows]

    def list_benchmarks(self, model_name: str) -> list[BenchmarkSummary]:
        """List uploaded benchmarks for a model (newest first)."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT
                    benchmark_id,
                    upload_date,
                    provider_model,
                    COUNT(*) AS num_runs,
                    AVG(input_avg_len) AS avg_input_tokens,
                    AVG(output_avg_len) AS avg_output_tokens
                FROM benchmarks
                WHERE provider_model = ?
                GROUP BY benchmark_id, upload_date, provider_model
                ORDER BY upload_date DESC
                """,
                (model_name,),
            ).fetchall()

            return [BenchmarkSummary(**dict(row)) for row in rows]

    def get_benchmark(self, benchmark_id: str) -> list[dict]:
        """Get every stored row of one benchmark."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM benchmarks WHERE benchmark_id = ? ORDER BY id",
                (benchmark_id,),
            ).fetchall()

            return [dict(row) for row in rows]

    def delete_benchmark(self, benchmark_id: str) -> int:
        """Delete a benchmark.

        Returns:
            Number of rows deleted (0 when the benchmark does not exist).
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM benchmarks WHERE benchmark_id = ?",
                (benchmark_id,),
            )
            conn.commit()
            return cursor.rowcount
