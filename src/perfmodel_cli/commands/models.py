"""Models command - list benchmark coverage per model."""

from typing import Optional

import typer

from perfmodel.database import Database


def models_command(
    db_path: Optional[str] = typer.Option(
        None,
        "--db",
        help="SQLite database path",
        envvar="DATABASE_PATH",
    ),
) -> None:
    """List models with stored benchmarks."""
    summaries = Database(db_path).list_models()
    if not summaries:
        print("[llm-perfmodel] No benchmarks stored yet")
        return

    print(f"{'Model':<40}{'Benchmarks':>12}{'Runs':>8}{'Input range':>18}{'Output range':>18}")
    print("─" * 96)
    for s in summaries:
        input_range = f"{s.input_token_min:g}-{s.input_token_max:g}"
        output_range = f"{s.output_token_min:g}-{s.output_token_max:g}"
        print(f"{s.provider_model:<40}{s.num_benchmarks:>12}{s.num_runs:>8}{input_range:>18}{output_range:>18}")
