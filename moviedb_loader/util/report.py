"""Console tables for load summaries and query timings."""
from typing import List

from tabulate import tabulate

from moviedb_loader.models.load_summary import LoadSummary
from moviedb_loader.util.cal_utils import calculate_stat_summary


def format_load_summaries(summaries: List[LoadSummary]) -> str:
    headers = ["table", "rows", "inserted", "failed", "short", "long", "time (s)"]
    table_data = [
        [s.table, s.total_rows, s.inserted_rows, s.failed_rows, s.short_rows, s.long_rows, s.elapsed_seconds]
        for s in summaries
    ]
    return tabulate(table_data, headers=headers, tablefmt="github", stralign="left", numalign="right",
                    floatfmt=".2f")


def format_query_timings(timings: List[float]) -> str:
    stats = calculate_stat_summary(timings)
    headers = ["runs", "min (s)", "avg (s)", "p50 (s)", "p95 (s)", "max (s)"]
    row = [stats.count, stats.min, stats.avg, stats.p50, stats.p95, stats.max]
    return tabulate([row], headers=headers, tablefmt="github", numalign="right", floatfmt=".6f")
