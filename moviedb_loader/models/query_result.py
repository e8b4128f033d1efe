from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class QueryRunResult:
    """Outcome of one stored-query run."""
    query_file: Path
    result_file: Path
    column_count: int
    rows_written: int
    elapsed_seconds: float
    rss_delta_bytes: Optional[int] = None
    cpu_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["query_file"] = str(self.query_file)
        data["result_file"] = str(self.result_file)
        return data
