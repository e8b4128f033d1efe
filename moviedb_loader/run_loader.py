#!/usr/bin/env python3
"""
Load the IMDb datasets into SQLite and run the stored query on demand.

Workflow:
1. Load configuration (config_yaml/config.yaml, optional --env override)
2. Unless --preserve is given: delete the database file and load every
   dataset in the configured order, stopping at the first failure
3. Prompt: 'y' runs the query in query_file and writes result_file,
   'n' exits

Usage:
    python -m moviedb_loader.run_loader [--preserve] [--env NAME]
"""
import logging
import sqlite3
import sys
import time
from pathlib import Path
from typing import List, Optional

from moviedb_loader.cli.cli import parse_loader_args
from moviedb_loader.config.config_loader import ConfigLoader
from moviedb_loader.config.loader_config import LoaderConfig
from moviedb_loader.models.load_summary import LoadSummary
from moviedb_loader.service.database import Database
from moviedb_loader.service.errors import ConfigError, DatabaseError, LoadError, MovieDbError
from moviedb_loader.service.loader.tsv_loader import TsvLoader
from moviedb_loader.service.query.query_runner import QueryRunner
from moviedb_loader.util.file_utils import delete_file
from moviedb_loader.util.log_config import setup_logger
from moviedb_loader.util.report import format_load_summaries, format_query_timings

logger = setup_logger(__name__)

PROMPT = "Type 'y' to execute the stored query, or 'n' to exit the program: "


def load_datasets(database: Database, config: LoaderConfig) -> List[LoadSummary]:
    loader = TsvLoader(database, encoding=config.encoding)
    summaries = []
    for idx, dataset in enumerate(config.datasets, 1):
        logger.info(f"Dataset {idx}/{len(config.datasets)}: {dataset.path} -> {dataset.table}")
        try:
            summaries.append(loader.load(dataset))
        except LoadError:
            logger.error(f"Failed to load {dataset.path} into database")
            raise
    return summaries


def report_preserved(database: Database) -> None:
    try:
        tables = database.list_tables()
    except sqlite3.Error as e:
        raise DatabaseError(f"Cannot read preserved database {database.db_file}", str(e)) from e

    if not tables:
        logger.warning(f"Preserved database {database.db_file} has no tables")
        return
    logger.info(f"Reusing {len(tables)} table(s): {', '.join(tables)}")


def prompt_loop(runner: QueryRunner, query_file: Path, result_file: Path) -> List[float]:
    """
    Ask for 'y' or 'n' until the user exits.

    Input is compared exactly; only the trailing newline is removed.

    Returns:
        Wall-clock seconds of every query run
    """
    timings: List[float] = []
    while True:
        try:
            answer = input(PROMPT)
        except EOFError:
            print()
            logger.warning("End of input, exiting")
            break

        if answer == "y":
            start = time.perf_counter()
            result = runner.run(query_file, result_file)
            elapsed = time.perf_counter() - start
            timings.append(elapsed)
            print(f"Query executed in {elapsed:f} seconds")
            logger.info(f"{result.rows_written} row(s) written to {result.result_file}")
            if result.cpu_seconds is not None:
                logger.debug(f"CPU={result.cpu_seconds:.3f}s, RSS delta={result.rss_delta_bytes / 1024 / 1024:.1f}MB")
        elif answer == "n":
            print("Exiting the program.")
            break
        else:
            print("Invalid input. Please enter 'y' or 'n'.")
    return timings


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status: 0 on success, 1 on any fatal error
    """
    args, unknown = parse_loader_args(argv)

    try:
        config = ConfigLoader(env=args.env).config_data
    except ConfigError as e:
        logger.error(str(e))
        return 1

    setup_logger(__name__, level=getattr(logging, config.log_level, logging.INFO), log_file=config.log_file)
    if unknown:
        logger.warning(f"Ignoring unrecognised arguments: {' '.join(unknown)}")
    if args.env:
        logger.info(f"Loaded configuration with environment override: {args.env}")

    if not args.preserve:
        try:
            delete_file(config.db_file)
        except OSError as e:
            logger.error(f"Failed to delete existing database: {e}")
            return 1

    database = Database(config.db_file)
    timings: List[float] = []
    try:
        database.open()
        if args.preserve:
            report_preserved(database)
        else:
            summaries = load_datasets(database, config)
            print(format_load_summaries(summaries))

        runner = QueryRunner(database, max_query_bytes=config.query_max_bytes, encoding=config.encoding)
        timings = prompt_loop(runner, config.query_file, config.result_file)
    except MovieDbError as e:
        logger.error(str(e))
        return 1
    finally:
        database.close()

    if timings:
        print(format_query_timings(timings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
