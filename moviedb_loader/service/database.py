"""
SQLite connection wrapper.

One Database object owns the only connection of the process and is handed
explicitly to the loader and the query runner. The connection runs in
autocommit mode (``isolation_level=None``); transactions are opened and
closed explicitly with :meth:`Database.transaction`.
"""
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from moviedb_loader.config.dataset import quote_identifier
from moviedb_loader.service.errors import DatabaseError
from moviedb_loader.util.log_config import setup_logger

logger = setup_logger(__name__)

# Relaxed durability while bulk inserting, and the defaults restored afterwards
BULK_INSERT_PRAGMAS = ("PRAGMA synchronous = OFF;", "PRAGMA journal_mode = MEMORY;")
DEFAULT_PRAGMAS = ("PRAGMA synchronous = FULL;", "PRAGMA journal_mode = DELETE;")


class Database:

    def __init__(self, db_file: Path):
        self.db_file = Path(db_file)
        self._con: Optional[sqlite3.Connection] = None

    def open(self) -> "Database":
        if self._con is not None:
            return self
        try:
            self._con = sqlite3.connect(str(self.db_file), isolation_level=None)
        except sqlite3.Error as e:
            raise DatabaseError(f"Can't open database {self.db_file}", str(e)) from e
        logger.debug(f"Opened database {self.db_file} (SQLite {sqlite3.sqlite_version})")
        return self

    def close(self) -> None:
        if self._con is None:
            return
        try:
            if self._con.in_transaction:
                self._con.rollback()
            self._con.close()
        finally:
            self._con = None
        logger.debug(f"Closed database {self.db_file}")

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._con is None:
            raise DatabaseError(f"Database {self.db_file} is not open")
        return self._con

    def cursor(self) -> sqlite3.Cursor:
        return self.connection.cursor()

    def execute(self, sql: str, params: Sequence = ()) -> sqlite3.Cursor:
        """Execute one statement; engine errors propagate as sqlite3.Error."""
        return self.connection.execute(sql, params)

    def try_execute(self, sql: str) -> None:
        """Execute a control statement, logging instead of raising on failure."""
        try:
            self.connection.execute(sql).close()
        except sqlite3.Error as e:
            logger.warning(f"SQL error: {e} ({sql})")

    def check_prepare(self, sql: str, param_count: int) -> None:
        """
        Compile ``sql`` without running it.

        EXPLAIN makes the engine prepare the statement and return its program
        instead of executing it, so a bad statement fails here with the
        engine's message.
        """
        cur = self.connection.execute(f"EXPLAIN {sql}", [None] * param_count)
        cur.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """BEGIN ... COMMIT, rolled back if the block raises."""
        try:
            self.connection.execute("BEGIN TRANSACTION;")
        except sqlite3.Error as e:
            raise DatabaseError("Failed to begin transaction", str(e)) from e

        try:
            yield
        except BaseException:
            # The original error is re-raised even if the rollback fails
            if self.connection.in_transaction:
                try:
                    self.connection.execute("ROLLBACK;")
                    logger.debug("Transaction rolled back")
                except sqlite3.Error as e:
                    logger.error(f"Failed to roll back transaction: {e}")
            raise

        try:
            self.connection.execute("COMMIT;")
        except sqlite3.Error as e:
            raise DatabaseError("Failed to commit transaction", str(e)) from e

    @contextmanager
    def bulk_insert_settings(self) -> Iterator[None]:
        """
        Disable synchronous flushing and keep the rollback journal in memory
        for the duration of the block. Best effort: failures are logged only.
        """
        for pragma in BULK_INSERT_PRAGMAS:
            self.try_execute(pragma)
        try:
            yield
        finally:
            for pragma in DEFAULT_PRAGMAS:
                self.try_execute(pragma)

    def list_tables(self) -> List[str]:
        rows = self.connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        ).fetchall()
        return [row[0] for row in rows]

    def row_count(self, table: str) -> int:
        return self.connection.execute(f"SELECT COUNT(*) FROM {quote_identifier(table)}").fetchone()[0]
