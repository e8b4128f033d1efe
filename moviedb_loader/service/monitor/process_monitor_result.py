from dataclasses import dataclass
from typing import Dict

from moviedb_loader.service.monitor.process_snapshot import ProcessSnapshot


@dataclass
class ProcessMonitorResult:
    """Resource usage between two snapshots of this process"""
    execution_time: float
    cpu_seconds: float
    rss_delta_bytes: int
    start: ProcessSnapshot
    end: ProcessSnapshot

    @property
    def cpu_percent(self) -> float:
        if self.execution_time <= 0:
            return 0.0
        return self.cpu_seconds / self.execution_time * 100.0

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'execution_time': self.execution_time,
            'cpu_seconds': self.cpu_seconds,
            'cpu_percent': self.cpu_percent,
            'rss_delta_bytes': self.rss_delta_bytes,
            'start_rss_bytes': self.start.rss_bytes,
            'end_rss_bytes': self.end.rss_bytes,
        }
