"""Benchmark service for uploading and browsing stored benchmarks."""

from perfmodel.core.models import BenchmarkSummary, ModelSummary, UploadResult
from perfmodel.database import Database
from perfmodel.ingest import BenchmarkIngestor


class BenchmarkService:
    """Service for managing stored benchmark data."""

    def __init__(self, db: Database):
        self.db = db
        self.ingestor = BenchmarkIngestor(db)

    def upload(self, csv_text: str) -> UploadResult:
        """Store a benchmark CSV upload.

        Raises:
            IngestError: If the CSV cannot be parsed.
        """
        return self.ingestor.upload(csv_text)

    def list_models(self) -> list[ModelSummary]:
        return self.db.list_models()

    def list_benchmarks(self, model: str) -> list[BenchmarkSummary]:
        return self.db.list_benchmarks(model)

    def get_benchmark(self, benchmark_id: str) -> list[dict]:
        return self.db.get_benchmark(benchmark_id)

    def delete_benchmark(self, benchmark_id: str) -> int:
        return self.db.delete_benchmark(benchmark_id)
