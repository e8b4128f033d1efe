from dataclasses import dataclass


@dataclass
class ProcessSnapshot:
    """Single process resource usage snapshot"""
    timestamp: float
    rss_bytes: int
    cpu_seconds: float
