"""Benchmark storage."""

from perfmodel.database.database import DATA_COLUMNS, NUMERIC_COLUMNS, TEXT_COLUMNS, Database

__all__ = ["Database", "DATA_COLUMNS", "NUMERIC_COLUMNS", "TEXT_COLUMNS"]
