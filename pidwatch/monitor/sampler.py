"""
Sampler Module

Polls the metrics provider once per second and feeds the process status.
CPU utilization is derived from two cumulative CPU-time reads taken one
interval apart; memory is the value read at the end of the interval.
"""
import threading
from typing import Callable, Optional

from pidwatch.consts.TerminationTrigger import TerminationTrigger
from pidwatch.exceptions import ProcessGone
from pidwatch.monitor.metrics_provider import MetricsProvider
from pidwatch.monitor.process_status import ProcessStatus
from pidwatch.monitor.shutdown_coordinator import ShutdownCoordinator
from pidwatch.util.log_config import setup_logger

logger = setup_logger(__name__)

SAMPLE_INTERVAL_SECONDS = 1.0


def cpu_percentage(cpu_seconds: float) -> float:
    """CPU seconds consumed during one interval, as a percentage of that interval"""
    return cpu_seconds / SAMPLE_INTERVAL_SECONDS * 100.0


class Sampler:
    """Sampling loop for one process"""

    def __init__(
        self,
        pid: int,
        provider: MetricsProvider,
        status: ProcessStatus,
        coordinator: ShutdownCoordinator,
        sleep: Optional[Callable[[float], None]] = None
    ):
        self.pid = pid
        self.provider = provider
        self.status = status
        self.coordinator = coordinator
        self.sleep = sleep or coordinator.pause
        self.ticks = 0
        self.thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        """Run the loop in a background thread"""
        self.thread = threading.Thread(target=self.run, name="pidwatch-sampler", daemon=True)
        self.thread.start()
        return self.thread

    def run(self) -> None:
        """Sample until the process exits or termination starts elsewhere"""
        logger.debug(f"Sampling process {self.pid} every {SAMPLE_INTERVAL_SECONDS}s")
        try:
            while not self.coordinator.is_terminating:
                self.tick()
        except ProcessGone:
            logger.info(f"Process {self.pid} exited after {self.ticks} samples")
            self.coordinator.finish(TerminationTrigger.PROCESS_EXIT)
        except Exception as e:
            # Runs on a worker thread; hand the error to the waiting main thread
            logger.error(f"Sampler failed: {e}")
            self.coordinator.fail(e)

    def tick(self) -> bool:
        """
        Take one sample.

        Returns:
            True if a sample was recorded

        Raises:
            ProcessGone: the process exited; the partial tick is discarded
        """
        self.provider.refresh()
        t0 = self.provider.cpu_cumulative_of(self.pid)

        self.sleep(SAMPLE_INTERVAL_SECONDS)
        if self.coordinator.is_terminating:
            return False

        self.provider.refresh()
        memory = self.provider.memory_of(self.pid)
        t1 = self.provider.cpu_cumulative_of(self.pid)

        delta = t1 - t0
        if delta < 0:
            logger.warning(f"Negative CPU time delta ({delta:.3f}s) for process {self.pid}, clamping to 0")
            delta = 0.0
        cpu_percent = cpu_percentage(delta)

        recorded = self.status.update(memory, cpu_percent)
        if recorded:
            self.ticks += 1
            logger.debug(f"Sample {self.ticks}: memory={memory}B cpu={cpu_percent:.1f}%")
        return recorded
