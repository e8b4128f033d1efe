"""Models for loader and query results."""

from .load_summary import LoadSummary, RowFailure
from .query_result import QueryRunResult
from .stat_summary import StatSummary

__all__ = ["LoadSummary", "RowFailure", "QueryRunResult", "StatSummary"]
