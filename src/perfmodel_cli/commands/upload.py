"""Upload command - store a benchmark CSV."""

from pathlib import Path
from typing import Optional

import typer

from perfmodel.core.errors import IngestError
from perfmodel.database import Database
from perfmodel.ingest import BenchmarkIngestor


def upload_command(
    file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Benchmark CSV file",
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db",
        help="SQLite database path",
        envvar="DATABASE_PATH",
    ),
) -> None:
    """Store every row of a benchmark CSV under a new benchmark id."""
    if file.suffix.lower() != ".csv":
        print("[llm-perfmodel] Error: only CSV files are allowed")
        raise typer.Exit(1)

    ingestor = BenchmarkIngestor(Database(db_path))
    try:
        result = ingestor.upload(file.read_text(encoding="utf-8"))
    except IngestError as e:
        print(f"[llm-perfmodel] Error: {e}")
        raise typer.Exit(1)

    print(f"[llm-perfmodel] Benchmark ID: {result.benchmark_id}")
    print(f"[llm-perfmodel] Rows inserted: {result.rows_inserted}")
