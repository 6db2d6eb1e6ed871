"""
Metrics Provider Module

Thin psutil wrapper exposing point-in-time memory usage and cumulative CPU
time of a single process. Reads are served from the last refresh() so that
memory and CPU figures within one tick come from the same OS snapshot.
"""
from dataclasses import dataclass
from typing import Optional

import psutil

from pidwatch.consts.MemoryMetric import MemoryMetric
from pidwatch.exceptions import MonitorError, ProcessGone, SetupError
from pidwatch.util.log_config import setup_logger

logger = setup_logger(__name__)


@dataclass
class ProcessReading:
    """One refreshed view of the process"""
    memory_bytes: int
    cpu_seconds: float  # user + system, cumulative since process start


class MetricsProvider:
    """Read memory and cumulative CPU time of one process"""

    def __init__(self, pid: int, memory_metric: MemoryMetric = MemoryMetric.RSS):
        """
        Attach to a process.

        Args:
            pid: Process ID to monitor
            memory_metric: Which memory figure to report

        Raises:
            SetupError: if the pid does not exist or cannot be inspected
        """
        self.pid = pid
        self.memory_metric = memory_metric
        self.reading: Optional[ProcessReading] = None

        try:
            self.process = psutil.Process(pid)
            self.name = self.process.name()
        except psutil.NoSuchProcess:
            raise SetupError(f"Process {pid} not found") from None
        except psutil.AccessDenied:
            raise SetupError(f"Access denied to process {pid}") from None

    def refresh(self) -> ProcessReading:
        """
        Re-read OS state for the process.

        Raises:
            ProcessGone: the process has exited
            MonitorError: any other psutil failure
        """
        try:
            with self.process.oneshot():
                if not self.process.is_running() or self.process.status() == psutil.STATUS_ZOMBIE:
                    raise ProcessGone(self.pid)
                cpu_times = self.process.cpu_times()
                memory = self._read_memory()
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            raise ProcessGone(self.pid) from None
        except psutil.Error as e:
            raise MonitorError(f"Failed to read metrics of process {self.pid}: {e}") from e

        self.reading = ProcessReading(
            memory_bytes=int(memory),
            cpu_seconds=cpu_times.user + cpu_times.system,
        )
        return self.reading

    def memory_of(self, pid: int) -> int:
        """Memory usage in bytes from the last refresh"""
        return self._current(pid).memory_bytes

    def cpu_cumulative_of(self, pid: int) -> float:
        """Cumulative CPU seconds from the last refresh"""
        return self._current(pid).cpu_seconds

    def _current(self, pid: int) -> ProcessReading:
        if pid != self.pid:
            raise ValueError(f"Provider is attached to pid {self.pid}, not {pid}")
        if self.reading is None:
            return self.refresh()
        return self.reading

    def _read_memory(self) -> int:
        if self.memory_metric == MemoryMetric.USS:
            return self.process.memory_full_info().uss
        mem_info = self.process.memory_info()
        if self.memory_metric == MemoryMetric.VMS:
            return mem_info.vms
        return mem_info.rss
