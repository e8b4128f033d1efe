"""
Run the stored query and write its rows as tab-separated text.

Output format: one line per result row, columns joined by '\t', every line
terminated by '\n', SQL NULL written as the literal ``NULL``. The result file
is truncated on every run.
"""
import math
import sqlite3
import time
from pathlib import Path
from typing import Any

from moviedb_loader.config.config_loader import DEFAULT_QUERY_MAX_BYTES
from moviedb_loader.consts.QueryErrorKind import QueryErrorKind
from moviedb_loader.models.query_result import QueryRunResult
from moviedb_loader.service.database import Database
from moviedb_loader.service.errors import QueryError
from moviedb_loader.service.monitor.process_monitor import ProcessMonitor
from moviedb_loader.util.file_utils import FileTooLargeError, load_text_file
from moviedb_loader.util.log_config import setup_logger
from moviedb_loader.util.sql_utils import leading_keyword, split_sql_text

logger = setup_logger(__name__)

NULL_TEXT = "NULL"


def _format_real(value: float) -> str:
    # Same text SQLite produces for a REAL: 15 significant digits, always a decimal point
    if math.isinf(value):
        return "Inf" if value > 0 else "-Inf"
    text = "%.15g" % value
    mantissa, sep, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return mantissa + sep + exponent


def format_value(value: Any) -> str:
    """Text representation of one column value."""
    if value is None:
        return NULL_TEXT
    if isinstance(value, float):
        return _format_real(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class QueryRunner:

    def __init__(self, database: Database, max_query_bytes: int = DEFAULT_QUERY_MAX_BYTES,
                 encoding: str = "utf-8"):
        self.database = database
        self.max_query_bytes = max_query_bytes
        self.encoding = encoding

    def read_query(self, query_file: Path) -> str:
        try:
            return load_text_file(query_file, max_bytes=self.max_query_bytes, encoding=self.encoding)
        except FileTooLargeError as e:
            raise QueryError(QueryErrorKind.TOO_LARGE,
                             f"Query file {query_file} is larger than {self.max_query_bytes} bytes",
                             f"{e.size} bytes") from e
        except (OSError, ValueError) as e:
            raise QueryError(QueryErrorKind.FILE_OPEN, f"Cannot open query file: {query_file}", str(e)) from e

    @staticmethod
    def first_statement(query: str) -> str:
        """The statement the engine would prepare: the first complete one in the buffer."""
        statements = split_sql_text(query)
        if not statements:
            raise QueryError(QueryErrorKind.PREPARE, "Failed to prepare query", "no SQL statement found")
        if len(statements) > 1:
            logger.warning(f"Query file holds {len(statements)} statements; only the first is executed")
        return statements[0]

    def run(self, query_file: Path, result_file: Path) -> QueryRunResult:
        """
        Execute the query stored in ``query_file`` and write its rows to ``result_file``.

        Raises:
            QueryError: FILE_OPEN, TOO_LARGE, PREPARE or EXECUTION
        """
        query = self.read_query(Path(query_file))
        logger.info(f"Executing query: {query}")
        statement = self.first_statement(query)

        monitor = ProcessMonitor()
        monitor.start()
        start = time.perf_counter()

        self._prepare(statement)

        cursor = self.database.cursor()
        try:
            # execute() already steps to the first row
            try:
                cursor.execute(statement)
            except sqlite3.Error as e:
                raise QueryError(QueryErrorKind.EXECUTION, "Failed to execute query", str(e)) from e

            column_count = len(cursor.description) if cursor.description else 0
            rows_written = self._write_rows(cursor, Path(result_file))
        finally:
            cursor.close()

        elapsed = time.perf_counter() - start
        usage = monitor.stop()
        logger.debug(f"Wrote {rows_written} row(s) x {column_count} column(s) to {result_file}")
        if usage:
            logger.debug(f"Resource usage: {usage.to_dict()}")
        return QueryRunResult(
            query_file=Path(query_file),
            result_file=Path(result_file),
            column_count=column_count,
            rows_written=rows_written,
            elapsed_seconds=elapsed,
            rss_delta_bytes=usage.rss_delta_bytes if usage else None,
            cpu_seconds=usage.cpu_seconds if usage else None,
        )

    def _prepare(self, statement: str) -> None:
        # An EXPLAIN statement cannot itself be wrapped in EXPLAIN
        if leading_keyword(statement) == "EXPLAIN":
            return
        try:
            self.database.check_prepare(statement, 0)
        except sqlite3.Error as e:
            raise QueryError(QueryErrorKind.PREPARE, "Failed to prepare query", str(e)) from e

    @staticmethod
    def _write_rows(cursor: sqlite3.Cursor, result_file: Path) -> int:
        try:
            out = open(result_file, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise QueryError(QueryErrorKind.FILE_OPEN, f"Cannot open result file: {result_file}", str(e)) from e

        rows_written = 0
        with out:
            try:
                for row in cursor:
                    out.write("\t".join(format_value(v) for v in row))
                    out.write("\n")
                    rows_written += 1
            except sqlite3.Error as e:
                raise QueryError(QueryErrorKind.EXECUTION, "Failed to execute query", str(e)) from e
        return rows_written
