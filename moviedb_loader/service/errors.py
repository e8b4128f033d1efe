"""
Exception hierarchy for the loader.

Every error carries the engine's diagnostic text in ``detail`` when one is
available, so the driver can report it verbatim.
"""
from pathlib import Path
from typing import Optional, Union

from moviedb_loader.consts.LoadErrorKind import LoadErrorKind
from moviedb_loader.consts.QueryErrorKind import QueryErrorKind


class MovieDbError(Exception):
    """Base class for every fatal loader error."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(f"{message}: {detail}" if detail else message)


class ConfigError(MovieDbError):
    pass


class DatabaseError(MovieDbError):
    pass


class LoadError(MovieDbError):
    """A dataset could not be loaded."""

    def __init__(self, kind: LoadErrorKind, table: str, source: Union[str, Path], detail: Optional[str] = None):
        self.kind = kind
        self.table = table
        self.source = Path(source)
        messages = {
            LoadErrorKind.FILE_OPEN: f"Cannot open file: {source}",
            LoadErrorKind.SCHEMA_CREATE: f"Failed to create table {table}",
            LoadErrorKind.STATEMENT_PREPARE: f"Failed to prepare insert statement for {table}",
            LoadErrorKind.EMPTY_FILE: f"No data rows in file: {source}",
        }
        super().__init__(messages[kind], detail)


class QueryError(MovieDbError):
    """The stored query could not be run or its results could not be written."""

    def __init__(self, kind: QueryErrorKind, message: str, detail: Optional[str] = None):
        self.kind = kind
        super().__init__(message, detail)
