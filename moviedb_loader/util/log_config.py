"""
Logging configuration for the loader.

All module loggers hang off the ``moviedb_loader`` package logger, which owns
the handlers: a clean console format split between stdout (below WARNING)
and stderr (WARNING and above), plus an optional detailed log file.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "moviedb_loader"
STDOUT_HANDLER = "moviedb_loader.stdout"
STDERR_HANDLER = "moviedb_loader.stderr"


class _MaxLevelFilter(logging.Filter):
    """Pass only records strictly below ``level``."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _console_handlers(level: int) -> list:
    # Clean format: [LEVEL] message
    console_formatter = logging.Formatter(fmt='[%(levelname)s] %(message)s')

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.set_name(STDOUT_HANDLER)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(console_formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.set_name(STDERR_HANDLER)
    stderr_handler.setLevel(max(level, logging.WARNING))
    stderr_handler.setFormatter(console_formatter)

    return [stdout_handler, stderr_handler]


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure the package logger and return the logger for ``name``.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)
        log_file: Optional file path for log output

    Returns:
        Logger instance that propagates to the package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Console handlers are installed once; later calls only adjust the level
    console = {h.get_name(): h for h in package_logger.handlers
               if h.get_name() in (STDOUT_HANDLER, STDERR_HANDLER)}
    if not console:
        for handler in _console_handlers(level):
            package_logger.addHandler(handler)
    else:
        console[STDOUT_HANDLER].setLevel(level)
        console[STDERR_HANDLER].setLevel(max(level, logging.WARNING))

    # Optional file handler with more detailed format
    if log_file:
        log_file = Path(log_file).resolve()
        already_attached = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file
            for h in package_logger.handlers
        )
        if not already_attached:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)

            file_formatter = logging.Formatter(
                fmt='%(asctime)s [%(levelname)s] %(name)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            package_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    package_logger.propagate = False

    return logging.getLogger(name)
