"""LLM Performance Modeler CLI - Main entry point."""

import logging
from typing import Optional

import typer

from perfmodel_cli import __version__
from perfmodel_cli.commands.info import info_command
from perfmodel_cli.commands.models import models_command
from perfmodel_cli.commands.predict import predict_command
from perfmodel_cli.commands.upload import upload_command

app = typer.Typer(
    name="llm-perfmodel",
    help="Predict LLM serving performance from benchmark history",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print(f"llm-perfmodel version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show modeling diagnostics",
    ),
) -> None:
    """LLM Performance Modeler - predict TTFT, TPS and E2E latency.

    Upload benchmark CSVs for a model, then predict its performance at
    input/output token counts you have not benchmarked.

    Examples:

        # Store a benchmark run
        llm-perfmodel upload results.csv

        # See which models have data
        llm-perfmodel models

        # Predict at a new operating point
        llm-perfmodel predict -m llama-3-8b -i 2048 -o 512
    """
    logging.basicConfig(
        format="[llm-perfmodel] %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


# Register commands
app.command("upload", help="Store a benchmark CSV")(upload_command)
app.command("models", help="List models with benchmark data")(models_command)
app.command("predict", help="Predict performance for a model")(predict_command)
app.command("info", help="Show system information")(info_command)


if __name__ == "__main__":
    app()
