"""
Process Status Module

Running aggregate of every sample taken from the monitored process.
Shared between the sampler thread and the signal handler, so every access
goes through one lock.
"""
import threading
from typing import List

from pidwatch.monitor.status_snapshot import StatusSnapshot


class ProcessStatus:
    """Ordered memory/CPU samples plus their maxima"""

    def __init__(self):
        self.memory_max: int = 0
        self.memory_usage: List[int] = []
        self.cpu_max: float = 0.0
        self.cpu_usage: List[float] = []
        self.sealed = False
        self._lock = threading.Lock()

    def update(self, memory: int, cpu_percent: float) -> bool:
        """
        Record one tick.

        Args:
            memory: Memory usage in bytes
            cpu_percent: CPU utilization over the tick

        Returns:
            False if the status was already sealed and the sample was dropped
        """
        with self._lock:
            if self.sealed:
                return False
            self.memory_usage.append(memory)
            self.cpu_usage.append(cpu_percent)
            if memory > self.memory_max:
                self.memory_max = memory
            if cpu_percent > self.cpu_max:
                self.cpu_max = cpu_percent
            return True

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._copy()

    def seal(self) -> StatusSnapshot:
        """Take the final snapshot; later updates are rejected"""
        with self._lock:
            self.sealed = True
            return self._copy()

    def _copy(self) -> StatusSnapshot:
        return StatusSnapshot(
            memory_max=self.memory_max,
            cpu_max=self.cpu_max,
            memory_usage=tuple(self.memory_usage),
            cpu_usage=tuple(self.cpu_usage),
        )
