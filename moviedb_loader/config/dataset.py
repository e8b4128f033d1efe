"""
Dataset descriptor data class.

This module provides the Dataset class describing one TSV source file and the
table it is loaded into.
"""

from dataclasses import dataclass
from pathlib import Path


def quote_identifier(name: str) -> str:
    """Quote a table or column name for SQLite."""
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class Dataset:

    path: Path
    table: str
    columns: int
    schema: str

    @property
    def insert_sql(self) -> str:
        placeholders = ", ".join("?" for _ in range(self.columns))
        return f"INSERT INTO {quote_identifier(self.table)} VALUES ({placeholders});"
