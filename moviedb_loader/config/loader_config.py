from pathlib import Path
from typing import List, Optional

from moviedb_loader.config.dataset import Dataset


class LoaderConfig:
    db_file: Path
    query_file: Path
    result_file: Path
    query_max_bytes: int
    encoding: str
    log_level: str
    log_file: Optional[Path]
    datasets: List[Dataset]

    def __repr__(self):
        tables = ", ".join(ds.table for ds in self.datasets)
        return (f"LoaderConfig(db_file={self.db_file}, query_file={self.query_file}, "
                f"result_file={self.result_file}, datasets=[{tables}])")
