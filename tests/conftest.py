import signal

import pytest

from pidwatch.exceptions import ProcessGone
from pidwatch.monitor.process_status import ProcessStatus
from pidwatch.monitor.shutdown_coordinator import ShutdownCoordinator
from pidwatch.report.reporter import Reporter

GONE = object()


class FakeProvider:
    """Scripted metrics provider.

    Each read pops the next value from its queue; GONE (or an empty queue)
    raises ProcessGone like a real provider would once the pid disappears.
    """

    def __init__(self, pid=4242, cpu=(), memory=(), on_refresh=None, exhausted=GONE):
        self.pid = pid
        self.name = "fake"
        self.cpu = list(cpu)
        self.memory = list(memory)
        self.on_refresh = on_refresh
        self.exhausted = exhausted
        self.refreshes = 0
        self.calls = []

    def refresh(self):
        self.refreshes += 1
        self.calls.append("refresh")
        if self.on_refresh:
            self.on_refresh(self.refreshes)

    def _next(self, queue):
        value = queue.pop(0) if queue else self.exhausted
        if value is GONE:
            raise ProcessGone(self.pid)
        return value

    def memory_of(self, pid):
        self.calls.append("memory")
        return self._next(self.memory)

    def cpu_cumulative_of(self, pid):
        self.calls.append("cpu")
        return self._next(self.cpu)


class RecordingReporter(Reporter):
    """Reporter that counts writes"""

    def __init__(self):
        self.writes = []

    def write(self, snapshot, destination):
        self.writes.append((snapshot, destination))
        return super().write(snapshot, destination)


@pytest.fixture
def status():
    return ProcessStatus()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def report_path(tmp_path):
    return tmp_path / "report.txt"


@pytest.fixture
def coordinator(status, reporter, report_path):
    return ShutdownCoordinator(status, reporter, report_path)


@pytest.fixture
def restore_signals():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGUSR1)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)


def read_report(path):
    lines = path.read_text(encoding="utf-8").split("\n")
    assert lines[-1] == ""
    memory_line, cpu_line = lines[2], lines[3]
    return {
        "memory_max": int(lines[0].split(": ")[1]),
        "cpu_max": float(lines[1].split(": ")[1]),
        "memory_usage": [int(v) for v in memory_line.split(",")] if memory_line else [],
        "cpu_usage": [float(v) for v in cpu_line.split(",")] if cpu_line else [],
    }
