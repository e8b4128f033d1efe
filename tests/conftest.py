"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import moviedb_loader...' works
without installing, and provides shared fixtures for databases, TSV files
and configuration directories.
"""
import logging
import sys
import textwrap
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from moviedb_loader.config.dataset import Dataset  # noqa: E402
from moviedb_loader.service.database import Database  # noqa: E402
from moviedb_loader.util.log_config import PACKAGE_LOGGER  # noqa: E402


@pytest.fixture(autouse=True)
def _drop_file_log_handlers():
    """Detach log files opened by a test so they do not leak into the next one."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(logging.INFO)


@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path / "test.sqlite").open()
    yield db
    db.close()


@pytest.fixture
def write_tsv(tmp_path):
    """Write a TSV file from a header and rows of fields; returns its path."""

    def _write(name, header, rows, line_end="\n"):
        path = tmp_path / name
        lines = [header] + ["\t".join(row) if isinstance(row, (list, tuple)) else row for row in rows]
        path.write_bytes("".join(line + line_end for line in lines).encode("utf-8"))
        return path

    return _write


@pytest.fixture
def make_dataset():
    def _make(path, table="items", columns=3, schema=None):
        if schema is None:
            cols = ", ".join(f"c{i} TEXT" for i in range(1, columns + 1))
            schema = f"CREATE TABLE {table} ({cols});"
        return Dataset(path=Path(path), table=table, columns=columns, schema=schema)

    return _make


@pytest.fixture
def config_dir(tmp_path):
    """Write config.yaml (and optional overrides) into tmp_path/config; returns the directory."""

    def _write(text, **overrides):
        directory = tmp_path / "config"
        directory.mkdir(exist_ok=True)
        (directory / "config.yaml").write_text(textwrap.dedent(text), encoding="utf-8")
        for env, env_text in overrides.items():
            (directory / f"config_{env}.yaml").write_text(textwrap.dedent(env_text), encoding="utf-8")
        return directory

    return _write
