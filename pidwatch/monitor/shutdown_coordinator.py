"""
Shutdown Coordinator Module

Two things can end a monitoring run: the sampler noticing that the process
is gone, or a signal delivered to pidwatch itself. Whichever arrives first
writes the report; the other becomes a no-op.
"""
import signal
import threading
from types import FrameType
from typing import Iterable, Optional

from pidwatch.consts.TerminationTrigger import TerminationTrigger
from pidwatch.exceptions import SetupError
from pidwatch.monitor.process_status import ProcessStatus
from pidwatch.monitor.status_snapshot import StatusSnapshot
from pidwatch.report.reporter import Reporter
from pidwatch.util.log_config import setup_logger

logger = setup_logger(__name__)


class ShutdownCoordinator:
    """Produce the final report exactly once"""

    def __init__(self, status: ProcessStatus, reporter: Reporter, destination):
        self.status = status
        self.reporter = reporter
        self.destination = destination
        self.trigger: Optional[TerminationTrigger] = None
        self.snapshot: Optional[StatusSnapshot] = None
        self.error: Optional[BaseException] = None
        # Acquired once and never released; acquire(blocking=False) is the
        # compare-and-set, and stays safe when a signal handler re-enters on
        # the thread that already holds it.
        self._claim = threading.Lock()
        self._terminating = threading.Event()
        self._done = threading.Event()

    @property
    def is_terminating(self) -> bool:
        return self._terminating.is_set()

    @property
    def is_done(self) -> bool:
        return self._done.is_set()

    def pause(self, seconds: float) -> None:
        """Sleep that ends early once termination has started"""
        self._terminating.wait(timeout=seconds)

    def _try_claim(self) -> bool:
        if not self._claim.acquire(blocking=False):
            return False
        self._terminating.set()
        return True

    def finish(self, trigger: TerminationTrigger, source: Optional[str] = None) -> bool:
        """
        Seal the status and write the report if nobody did yet.

        Args:
            trigger: What ended the run
            source: Optional detail for the log line, e.g. the signal name

        Returns:
            True if this call wrote (or attempted to write) the report
        """
        # no logging here: may run in a signal handler during a stdout write
        if not self._try_claim():
            return False

        self.trigger = trigger
        logger.info(f"Terminating: {trigger.value}" + (f" ({source})" if source else ""))
        try:
            self.snapshot = self.status.seal()
            self.reporter.write(self.snapshot, self.destination)
        except Exception as e:
            # re-raised by wait() on the main thread
            self.error = e
        finally:
            self._done.set()
        return True

    def fail(self, error: BaseException) -> bool:
        """End the run without a report"""
        if not self._try_claim():
            return False
        self.error = error
        self.status.seal()
        self._done.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[TerminationTrigger]:
        """
        Block until the run has ended.

        Returns:
            The trigger that ended the run, or None on timeout

        Raises:
            The fatal error recorded by finish() or fail()
        """
        if not self._done.wait(timeout=timeout):
            return None
        if self.error is not None:
            raise self.error
        return self.trigger

    def handle_signal(self, signum: int, _frame: Optional[FrameType]) -> None:
        self.finish(TerminationTrigger.INTERRUPT, source=signal.Signals(signum).name)

    def install_signal_handlers(self, signals: Iterable[signal.Signals]) -> None:
        """
        Route the given signals to handle_signal.

        Raises:
            SetupError: if a handler cannot be installed (e.g. not on the main thread)
        """
        for sig in signals:
            try:
                signal.signal(sig, self.handle_signal)
            except (ValueError, OSError) as e:
                raise SetupError(f"Cannot install handler for {sig.name}: {e}") from e
