"""
Process Monitor Module

Takes psutil snapshots of the current process before and after a piece of
work and reports wall time, CPU time and RSS growth in between. Sampling is
synchronous: no background thread is started.
"""
import os
import time
from typing import Optional

import psutil

from moviedb_loader.service.monitor.process_monitor_result import ProcessMonitorResult
from moviedb_loader.service.monitor.process_snapshot import ProcessSnapshot
from moviedb_loader.util.log_config import setup_logger

logger = setup_logger(__name__)


class ProcessMonitor:
    """Measure resource usage of this process between start() and stop()"""

    def __init__(self):
        self.pid = os.getpid()
        self.process: Optional[psutil.Process] = None
        self.start_snapshot: Optional[ProcessSnapshot] = None

    def _snapshot(self) -> Optional[ProcessSnapshot]:
        if self.process is None:
            return None
        try:
            with self.process.oneshot():
                cpu = self.process.cpu_times()
                rss = self.process.memory_info().rss
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.warning(f"Cannot sample process {self.pid}: {e}")
            return None
        return ProcessSnapshot(timestamp=time.perf_counter(), rss_bytes=rss, cpu_seconds=cpu.user + cpu.system)

    def start(self) -> None:
        try:
            self.process = psutil.Process(self.pid)
        except psutil.NoSuchProcess:
            logger.warning(f"Process {self.pid} not found")
            return
        self.start_snapshot = self._snapshot()

    def stop(self) -> Optional[ProcessMonitorResult]:
        """
        Take the closing snapshot.

        Returns:
            ProcessMonitorResult or None if either snapshot is missing
        """
        end = self._snapshot()
        if self.start_snapshot is None or end is None:
            return None
        return ProcessMonitorResult(
            execution_time=end.timestamp - self.start_snapshot.timestamp,
            cpu_seconds=end.cpu_seconds - self.start_snapshot.cpu_seconds,
            rss_delta_bytes=end.rss_bytes - self.start_snapshot.rss_bytes,
            start=self.start_snapshot,
            end=end,
        )
