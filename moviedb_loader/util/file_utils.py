import os
from pathlib import Path
from typing import Union

from moviedb_loader.util.log_config import setup_logger

logger = setup_logger(__name__)


class FileTooLargeError(OSError):
    """A file exceeds the size the caller is willing to read."""

    def __init__(self, path: Path, size: int, limit: int):
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(f"File {path} is {size} bytes, larger than the {limit} byte limit")


def delete_file(dst: Path) -> bool:
    """
    Delete an existing file at ``dst``.

    Returns True when a file was deleted, False when nothing was there.

    Raises:
        IsADirectoryError: If ``dst`` is a directory; it is left untouched.
        OSError: If the file exists but cannot be removed.
    """
    if dst.is_dir() and not dst.is_symlink():
        raise IsADirectoryError(f"Path is a directory, not a file: {dst}")
    if not (dst.exists() or dst.is_symlink()):
        return False

    try:
        dst.unlink()
    except OSError as e:
        logger.error(f"Failed to delete {dst}: {e}")
        raise

    logger.info(f"Deleted existing database: {dst}")
    return True


def load_text_file(
    file_path: Union[str, os.PathLike],
    *,
    max_bytes: int,
    encoding: str = "utf-8",
) -> str:
    """
    Load the full text content of a file, refusing files over ``max_bytes``.

    The content is returned verbatim, embedded newlines included.

    Raises:
        ValueError: If file_path is empty/whitespace.
        FileNotFoundError: If the file doesn't exist.
        IsADirectoryError: If the path is a directory.
        FileTooLargeError: If the file is larger than max_bytes.
        OSError: For other I/O errors (e.g., permission denied).
    """
    if not file_path or (isinstance(file_path, str) and not file_path.strip()):
        raise ValueError("File path cannot be empty or None")

    p = Path(file_path).expanduser()

    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    if p.is_dir():
        raise IsADirectoryError(f"Path is a directory, not a file: {p}")

    size = p.stat().st_size
    if size > max_bytes:
        raise FileTooLargeError(p, size, max_bytes)

    # newline="" keeps line terminators exactly as stored
    with open(p, "r", encoding=encoding, errors="replace", newline="") as f:
        return f.read()
