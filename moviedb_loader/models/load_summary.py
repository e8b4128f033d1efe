"""Load result data models."""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class RowFailure:
    """A data row that could not be decoded or that the engine refused to insert."""
    line_number: int  # 1-based line in the source file, header included
    message: str


@dataclass
class LoadSummary:
    """
    Outcome of loading one dataset.

    Row-level failures do not fail the load; they are counted here instead.
    """
    table: str
    source: Path
    total_rows: int = 0
    inserted_rows: int = 0
    short_rows: int = 0  # fewer fields than columns, trailing columns NULL
    long_rows: int = 0   # more fields than columns, extras discarded
    failures: List[RowFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failed_rows(self) -> int:
        return len(self.failures)

    @property
    def first_error(self) -> Optional[RowFailure]:
        return self.failures[0] if self.failures else None

    def record_failure(self, line_number: int, message: str) -> None:
        self.failures.append(RowFailure(line_number, message))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source"] = str(self.source)
        data["failed_rows"] = self.failed_rows
        return data
