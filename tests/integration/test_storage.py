"""Integration tests for benchmark storage and CSV ingestion."""

import pytest

from perfmodel.core.errors import IngestError
from perfmodel.ingest import BenchmarkIngestor


class TestBenchmarkIngestor:
    """Upload through the ingestor into SQLite."""

    def test_upload_stores_rows(self, temp_db, sample_csv):
        result = BenchmarkIngestor(temp_db).upload(sample_csv)

        assert result.rows_inserted == 3
        rows = temp_db.get_benchmark(result.benchmark_id)
        assert len(rows) == 3
        assert rows[0]["ttft_p05"] == 80.0
        assert rows[0]["e2e_p80"] == 1200.0
        assert rows[0]["upload_date"]

    def test_each_upload_gets_new_id(self, temp_db, sample_csv):
        ingestor = BenchmarkIngestor(temp_db)

        first = ingestor.upload(sample_csv)
        second = ingestor.upload(sample_csv)

        assert first.benchmark_id != second.benchmark_id

    def test_invalid_upload_stores_nothing(self, temp_db):
        with pytest.raises(IngestError):
            BenchmarkIngestor(temp_db).upload("provider_model,input_avg_len\nm,1\n")

        assert temp_db.list_model_names() == []


class TestDatabase:
    """Queries over stored benchmarks."""

    def test_fetch_rows(self, temp_db, sample_csv):
        BenchmarkIngestor(temp_db).upload(sample_csv)

        rows = temp_db.fetch_rows("llama-3-8b")

        assert [row.input_avg_len for row in rows] == [100.0, 200.0, 300.0]
        assert rows[0].traffic_level == 1.0
        assert rows[0].summary_job_level_tps == 500.0
        assert rows[0].ttft_p999 is None

    def test_fetch_rows_unknown_model(self, temp_db, sample_csv):
        BenchmarkIngestor(temp_db).upload(sample_csv)
        assert temp_db.fetch_rows("other-model") == []

    def test_list_models(self, temp_db, sample_csv):
        ingestor = BenchmarkIngestor(temp_db)
        ingestor.upload(sample_csv)
        ingestor.upload(sample_csv)

        summaries = temp_db.list_models()

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.provider_model == "llama-3-8b"
        assert summary.num_benchmarks == 2
        assert summary.num_runs == 6
        assert summary.input_token_min == 100.0
        assert summary.input_token_max == 300.0
        assert summary.output_token_max == 200.0

    def test_list_benchmarks(self, temp_db, sample_csv):
        result = BenchmarkIngestor(temp_db).upload(sample_csv)

        benchmarks = temp_db.list_benchmarks("llama-3-8b")

        assert len(benchmarks) == 1
        assert benchmarks[0].benchmark_id == result.benchmark_id
        assert benchmarks[0].num_runs == 3
        assert benchmarks[0].avg_input_tokens == pytest.approx(200.0)

    def test_delete_benchmark(self, temp_db, sample_csv):
        result = BenchmarkIngestor(temp_db).upload(sample_csv)

        assert temp_db.delete_benchmark(result.benchmark_id) == 3
        assert temp_db.get_benchmark(result.benchmark_id) == []
        assert temp_db.delete_benchmark(result.benchmark_id) == 0

    def test_creates_parent_directory(self, tmp_path):
        from perfmodel.database import Database

        db = Database(str(tmp_path / "nested" / "dir" / "bench.db"))

        assert db.db_path.parent.exists()
