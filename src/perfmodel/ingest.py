"""Benchmark CSV ingestion."""

import csv
import io
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from perfmodel.core.errors import IngestError
from perfmodel.core.models import UploadResult
from perfmodel.database import NUMERIC_COLUMNS, TEXT_COLUMNS, Database

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("provider_model", "input_avg_len", "output_avg_len")


def _parse_number(value: Optional[str], column: str, line: int) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        number = float(value)
    except ValueError:
        raise IngestError(f"Line {line}: column '{column}' is not numeric: {value!r}") from None
    if not math.isfinite(number):
        raise IngestError(f"Line {line}: column '{column}' is not finite: {value!r}")
    if number < 0:
        raise IngestError(f"Line {line}: column '{column}' is negative: {value!r}")
    return number


def parse_benchmark_csv(text: str) -> list[dict[str, Any]]:
    """Parse benchmark CSV text into row dicts keyed by table column.

    Unknown columns (e.g. distribution blobs) are ignored; empty lines are
    skipped; empty cells become None.

    Raises:
        IngestError: On missing required columns/values or non-numeric cells.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = [name.strip() for name in (reader.fieldnames or [])]
    missing = [name for name in REQUIRED_COLUMNS if name not in header]
    if missing:
        raise IngestError(f"Missing required columns: {', '.join(missing)}")

    rows = []
    for record in reader:
        record = {key.strip(): value for key, value in record.items() if key is not None}
        if all(value is None or str(value).strip() == "" for value in record.values()):
            continue

        line = reader.line_num
        row: dict[str, Any] = {}
        for column in TEXT_COLUMNS:
            value = record.get(column)
            row[column] = value.strip() if value and value.strip() else None
        for column in NUMERIC_COLUMNS:
            row[column] = _parse_number(record.get(column), column, line)

        for column in REQUIRED_COLUMNS:
            if row[column] is None:
                raise IngestError(f"Line {line}: required column '{column}' is empty")
        rows.append(row)

    if not rows:
        raise IngestError("CSV contains no benchmark rows")
    return rows


class BenchmarkIngestor:
    """Store uploaded benchmark CSVs as a new benchmark."""

    def __init__(self, db: Database):
        self.db = db

    def upload(self, text: str) -> UploadResult:
        """Parse and insert a CSV upload.

        Args:
            text: CSV file contents.

        Returns:
            UploadResult with the new benchmark id and row count.
        """
        rows = parse_benchmark_csv(text)
        benchmark_id = str(uuid.uuid4())
        upload_date = datetime.now(timezone.utc).isoformat()

        inserted = self.db.insert_rows(benchmark_id, upload_date, rows)
        logger.info(f"Stored benchmark {benchmark_id} with {inserted} rows")
        return UploadResult(benchmark_id=benchmark_id, rows_inserted=inserted)
