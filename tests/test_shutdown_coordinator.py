import signal
import threading

import pytest

from pidwatch.consts.TerminationTrigger import TerminationTrigger
from pidwatch.exceptions import ReportWriteError, SetupError
from pidwatch.monitor import shutdown_coordinator
from pidwatch.monitor.sampler import Sampler
from pidwatch.monitor.shutdown_coordinator import ShutdownCoordinator
from pidwatch.report.reporter import Reporter
from tests.conftest import FakeProvider, read_report


def test_first_trigger_writes_report(status, coordinator, reporter, report_path):
    status.update(512, 3.0)

    assert coordinator.finish(TerminationTrigger.PROCESS_EXIT) is True

    assert coordinator.wait(timeout=1) == TerminationTrigger.PROCESS_EXIT
    assert len(reporter.writes) == 1
    assert read_report(report_path)["memory_usage"] == [512]


def test_second_trigger_is_a_no_op(status, coordinator, reporter, report_path):
    status.update(512, 3.0)
    coordinator.finish(TerminationTrigger.PROCESS_EXIT)
    first = report_path.read_text()

    assert coordinator.finish(TerminationTrigger.INTERRUPT) is False
    assert coordinator.fail(RuntimeError("late")) is False

    assert coordinator.trigger == TerminationTrigger.PROCESS_EXIT
    assert len(reporter.writes) == 1
    assert report_path.read_text() == first
    assert coordinator.wait(timeout=1) == TerminationTrigger.PROCESS_EXIT


def test_status_is_sealed_after_report(status, coordinator):
    coordinator.finish(TerminationTrigger.INTERRUPT)

    assert status.update(1, 1.0) is False
    assert coordinator.snapshot.samples_count == 0


def test_racing_triggers_write_exactly_once(status, reporter, report_path):
    for i in range(20):
        status.update(i, float(i))

    for _ in range(50):
        coordinator = ShutdownCoordinator(status, reporter, report_path)
        reporter.writes.clear()
        barrier = threading.Barrier(8)
        results = []

        def fire(trigger):
            barrier.wait()
            results.append(coordinator.finish(trigger))

        threads = [
            threading.Thread(target=fire, args=(TerminationTrigger.PROCESS_EXIT if n % 2 else TerminationTrigger.INTERRUPT,))
            for n in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert len(reporter.writes) == 1

    report = read_report(report_path)
    assert report["memory_usage"] == list(range(20))
    assert report["memory_max"] == 19


def test_signal_during_report_write_does_not_write_again(status, report_path):
    calls = []

    class ReentrantReporter(Reporter):
        def write(self, snapshot, destination):
            calls.append(snapshot)
            # a signal handler running on the same thread mid-write
            assert coordinator.finish(TerminationTrigger.INTERRUPT) is False
            return super().write(snapshot, destination)

    coordinator = ShutdownCoordinator(status, ReentrantReporter(), report_path)

    assert coordinator.finish(TerminationTrigger.PROCESS_EXIT) is True
    assert len(calls) == 1
    assert coordinator.wait(timeout=1) == TerminationTrigger.PROCESS_EXIT


def test_interrupt_between_sleep_and_memory_read(status, coordinator, reporter, report_path):
    provider = FakeProvider(cpu=[0.0, 0.5] * 10, memory=[100, 200, 300], exhausted=0.5)
    sleeps = {"n": 0}

    def sleep(seconds):
        sleeps["n"] += 1
        if sleeps["n"] == 2:
            coordinator.handle_signal(signal.SIGINT, None)

    sampler = Sampler(provider.pid, provider, status, coordinator, sleep=sleep)
    sampler.run()

    assert coordinator.wait(timeout=1) == TerminationTrigger.INTERRUPT
    assert len(reporter.writes) == 1
    report = read_report(report_path)
    assert report["memory_usage"] == [100]
    assert report["cpu_usage"] == [50.0]
    assert provider.memory == [200, 300]


def test_write_failure_is_raised_from_wait(status, tmp_path):
    coordinator = ShutdownCoordinator(status, Reporter(), tmp_path / "nope" / "report.txt")

    assert coordinator.finish(TerminationTrigger.PROCESS_EXIT) is True

    assert coordinator.is_done
    with pytest.raises(ReportWriteError):
        coordinator.wait(timeout=1)


def test_wait_times_out_while_running(coordinator):
    assert coordinator.wait(timeout=0.01) is None
    assert not coordinator.is_terminating


def test_pause_returns_early_once_terminating(coordinator):
    coordinator.finish(TerminationTrigger.INTERRUPT)

    waiter = threading.Thread(target=coordinator.pause, args=(30,))
    waiter.start()
    waiter.join(timeout=2)

    assert not waiter.is_alive()


def test_install_signal_handlers(coordinator, restore_signals):
    coordinator.install_signal_handlers([signal.SIGINT, signal.SIGTERM])

    assert signal.getsignal(signal.SIGINT) == coordinator.handle_signal
    assert signal.getsignal(signal.SIGTERM) == coordinator.handle_signal


def test_installing_handlers_off_main_thread_is_a_setup_error(coordinator):
    errors = []

    def install():
        try:
            coordinator.install_signal_handlers([signal.SIGTERM])
        except SetupError as e:
            errors.append(e)

    t = threading.Thread(target=install)
    t.start()
    t.join()

    assert len(errors) == 1


def test_delivered_signal_triggers_report(status, coordinator, reporter, report_path, restore_signals):
    status.update(42, 4.2)
    coordinator.install_signal_handlers([signal.SIGUSR1])

    signal.raise_signal(signal.SIGUSR1)

    assert coordinator.wait(timeout=1) == TerminationTrigger.INTERRUPT
    assert read_report(report_path)["memory_usage"] == [42]
    assert len(reporter.writes) == 1


class RecordingLogger:

    def __init__(self):
        self.messages = []

    def debug(self, msg):
        self.messages.append(msg)

    info = warning = error = debug


def test_signal_after_completion_logs_nothing(coordinator, monkeypatch):
    coordinator.finish(TerminationTrigger.PROCESS_EXIT)
    recorder = RecordingLogger()
    monkeypatch.setattr(shutdown_coordinator, "logger", recorder)

    coordinator.handle_signal(signal.SIGINT, None)

    assert recorder.messages == []
    assert coordinator.trigger == TerminationTrigger.PROCESS_EXIT


def test_winning_signal_is_named_in_log(coordinator, monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(shutdown_coordinator, "logger", recorder)

    coordinator.handle_signal(signal.SIGTERM, None)

    assert recorder.messages[0] == "Terminating: interrupt (SIGTERM)"
