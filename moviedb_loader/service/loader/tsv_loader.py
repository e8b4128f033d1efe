"""
Bulk loader for tab-separated dataset files.

Each file is loaded into a freshly created table inside a single
transaction:

1. open the source file
2. run the dataset's CREATE TABLE statement
3. relax synchronous flushing / journaling for the duration of the load
4. BEGIN, prepare the INSERT statement, skip the header, count the rows
5. insert every data row; a row the engine refuses is logged and counted,
   never fatal
6. COMMIT and restore the default durability settings

Lines are decoded strictly; a line that is not valid text in the configured
encoding is recorded as a row failure instead of being stored altered.
Values are bound as text; SQLite applies column affinity.
"""
import sqlite3
import time
from typing import BinaryIO, List, Optional

from moviedb_loader.config.dataset import Dataset
from moviedb_loader.consts.LoadErrorKind import LoadErrorKind
from moviedb_loader.models.load_summary import LoadSummary
from moviedb_loader.service.database import Database
from moviedb_loader.service.errors import LoadError
from moviedb_loader.util.log_config import setup_logger
from moviedb_loader.util.progress import ProgressReporter

logger = setup_logger(__name__)

# Row failures past this many are logged at DEBUG only
MAX_LOGGED_ROW_FAILURES = 10


def split_row(line: str, columns: int) -> List[Optional[str]]:
    """
    Turn one data line into exactly ``columns`` bind values.

    The trailing line terminator is removed, the line is split on tabs,
    fields past ``columns`` are dropped and missing trailing fields become
    None (NULL).
    """
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    fields: List[Optional[str]] = line.split("\t")
    if len(fields) >= columns:
        return fields[:columns]
    return fields + [None] * (columns - len(fields))


class TsvLoader:

    def __init__(self, database: Database, encoding: str = "utf-8"):
        self.database = database
        self.encoding = encoding

    def load(self, dataset: Dataset) -> LoadSummary:
        """
        Load ``dataset`` into its table.

        Returns:
            LoadSummary with the row counts and any row-level failures

        Raises:
            LoadError: FILE_OPEN, SCHEMA_CREATE, STATEMENT_PREPARE or EMPTY_FILE
        """
        start = time.perf_counter()
        summary = LoadSummary(table=dataset.table, source=dataset.path)

        try:
            # Binary: only b'\n' ends a line and each line is decoded on its own
            source = open(dataset.path, "rb")
        except OSError as e:
            raise LoadError(LoadErrorKind.FILE_OPEN, dataset.table, dataset.path, str(e)) from e

        with source:
            self._create_table(dataset)
            with self.database.bulk_insert_settings():
                with self.database.transaction():
                    self._prepare_insert(dataset)
                    summary.total_rows = self._count_data_rows(source, dataset)
                    logger.info(f"Loading table {dataset.table} with {summary.total_rows} entries:")
                    self._insert_rows(source, dataset, summary)

        summary.elapsed_seconds = time.perf_counter() - start
        logger.info(f"Finished loading {dataset.table}: {summary.inserted_rows}/{summary.total_rows} rows "
                    f"in {summary.elapsed_seconds:.2f}s")
        self._report_anomalies(summary, dataset)
        return summary

    def _create_table(self, dataset: Dataset) -> None:
        try:
            self.database.execute(dataset.schema).close()
        except sqlite3.Error as e:
            raise LoadError(LoadErrorKind.SCHEMA_CREATE, dataset.table, dataset.path, str(e)) from e

    def _prepare_insert(self, dataset: Dataset) -> None:
        try:
            self.database.check_prepare(dataset.insert_sql, dataset.columns)
        except sqlite3.Error as e:
            raise LoadError(LoadErrorKind.STATEMENT_PREPARE, dataset.table, dataset.path, str(e)) from e

    @staticmethod
    def _count_data_rows(source: BinaryIO, dataset: Dataset) -> int:
        """Count the lines after the header, then leave the file positioned at the first data row."""
        if not source.readline():
            raise LoadError(LoadErrorKind.EMPTY_FILE, dataset.table, dataset.path, "file has no header line")

        total = sum(1 for _ in source)
        if total == 0:
            raise LoadError(LoadErrorKind.EMPTY_FILE, dataset.table, dataset.path, "file has only a header line")

        source.seek(0)
        source.readline()
        return total

    def _insert_rows(self, source: BinaryIO, dataset: Dataset, summary: LoadSummary) -> None:
        progress = ProgressReporter(summary.total_rows)
        insert_sql = dataset.insert_sql
        cursor = self.database.cursor()
        try:
            # Line 1 is the header
            for current, raw in enumerate(source, start=1):
                progress.update(current)
                line_number = current + 1
                try:
                    line = raw.decode(self.encoding)
                except UnicodeDecodeError as e:
                    summary.record_failure(line_number, f"invalid {self.encoding} text: {e.reason}")
                    self._log_row_failure(summary, dataset, line_number, f"Decoding failed: {e}")
                    continue

                values = split_row(line, dataset.columns)
                field_count = line.count("\t") + 1
                if field_count < dataset.columns:
                    summary.short_rows += 1
                elif field_count > dataset.columns:
                    summary.long_rows += 1

                try:
                    cursor.execute(insert_sql, values)
                    summary.inserted_rows += 1
                except sqlite3.Error as e:
                    summary.record_failure(line_number, str(e))
                    self._log_row_failure(summary, dataset, line_number, f"Execution failed: {e}")
        finally:
            cursor.close()
            progress.finish()

    @staticmethod
    def _log_row_failure(summary: LoadSummary, dataset: Dataset, line_number: int, reason: str) -> None:
        message = f"{reason} ({dataset.path}, line {line_number})"
        if summary.failed_rows <= MAX_LOGGED_ROW_FAILURES:
            logger.warning(message)
        else:
            logger.debug(message)
        if summary.failed_rows == MAX_LOGGED_ROW_FAILURES:
            logger.warning(f"Further row failures for {dataset.table} are logged at DEBUG level")

    @staticmethod
    def _report_anomalies(summary: LoadSummary, dataset: Dataset) -> None:
        if summary.failed_rows:
            first = summary.first_error
            logger.warning(f"{summary.failed_rows} row(s) of {dataset.table} were not inserted; "
                           f"first failure at line {first.line_number}: {first.message}")
        if summary.short_rows or summary.long_rows:
            logger.warning(f"{dataset.table}: {summary.short_rows} row(s) with fewer than {dataset.columns} fields "
                           f"(missing columns stored as NULL), {summary.long_rows} row(s) with more "
                           f"(extra fields dropped)")
