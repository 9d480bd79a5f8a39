"""Unit tests for benchmark CSV parsing."""

import pytest

from perfmodel.core.errors import IngestError
from perfmodel.ingest import parse_benchmark_csv


class TestParseBenchmarkCsv:
    """Tests for parse_benchmark_csv."""

    def test_parses_rows(self, sample_csv):
        rows = parse_benchmark_csv(sample_csv)

        assert len(rows) == 3
        first = rows[0]
        assert first["provider_model"] == "llama-3-8b"
        assert first["traffic_mode"] == "concurrency"
        assert first["input_avg_len"] == 100.0
        assert first["ttft_p05"] == 80.0
        assert first["e2e_p80"] == 1200.0
        assert first["summary_job_level_tps"] == 500.0

    def test_absent_columns_are_none(self, sample_csv):
        first = parse_benchmark_csv(sample_csv)[0]

        assert first["ttft_p999"] is None
        assert first["acceptance_rate"] is None

    def test_unknown_columns_ignored(self, sample_csv):
        assert "ttft_distribution" not in parse_benchmark_csv(sample_csv)[0]

    def test_byte_order_mark(self, sample_csv):
        rows = parse_benchmark_csv("\ufeff" + sample_csv)
        assert rows[0]["provider_name"] == "vllm"

    def test_blank_lines_skipped(self):
        text = "provider_model,input_avg_len,output_avg_len\nm,1,2\n,,\n\nm,3,4\n"
        assert len(parse_benchmark_csv(text)) == 2

    def test_missing_required_column(self):
        with pytest.raises(IngestError, match="Missing required columns: output_avg_len"):
            parse_benchmark_csv("provider_model,input_avg_len\nm,1\n")

    def test_empty_required_value(self):
        with pytest.raises(IngestError, match="required column 'input_avg_len' is empty"):
            parse_benchmark_csv("provider_model,input_avg_len,output_avg_len\nm,,2\n")

    def test_non_numeric_value(self):
        with pytest.raises(IngestError, match="Line 2: column 'ttft_mean' is not numeric"):
            parse_benchmark_csv(
                "provider_model,input_avg_len,output_avg_len,ttft_mean\nm,1,2,fast\n"
            )

    def test_non_finite_value(self):
        with pytest.raises(IngestError, match="not finite"):
            parse_benchmark_csv("provider_model,input_avg_len,output_avg_len\nm,inf,2\n")

    def test_header_only(self):
        with pytest.raises(IngestError, match="no benchmark rows"):
            parse_benchmark_csv("provider_model,input_avg_len,output_avg_len\n")

    def test_negative_value(self):
        """Benchmark statistics and token counts are never negative."""
        with pytest.raises(IngestError, match="Line 2: column 'ttft_p95' is negative"):
            parse_benchmark_csv(
                "provider_model,input_avg_len,output_avg_len,ttft_p95\nm,1,2,-0.5\n"
            )

    def test_zero_allowed(self):
        rows = parse_benchmark_csv("provider_model,input_avg_len,output_avg_len,traffic_level\nm,1,2,0\n")
        assert rows[0]["traffic_level"] == 0.0
