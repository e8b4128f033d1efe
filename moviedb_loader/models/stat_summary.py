from dataclasses import dataclass


@dataclass
class StatSummary:
    """Statistical summary of a list of numeric values"""
    count: int
    min: float
    max: float
    p50: float
    p95: float
    avg: float
