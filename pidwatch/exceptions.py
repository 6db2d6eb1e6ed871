"""Exceptions raised by pidwatch."""


class PidWatchError(Exception):
    """Base class for all pidwatch errors"""


class ProcessGone(PidWatchError):
    """The monitored pid no longer resolves to a live process.

    Raised by the metrics provider and used by the sampler as the
    process-exit termination trigger, not as a failure.
    """

    def __init__(self, pid: int):
        super().__init__(f"Process {pid} is gone")
        self.pid = pid


class SetupError(PidWatchError):
    """Monitoring could not start (bad pid, permissions, signal handlers, config)"""


class MonitorError(PidWatchError):
    """Unexpected metrics failure while sampling"""


class ReportWriteError(PidWatchError):
    """The report could not be written to its destination"""

    def __init__(self, destination, cause: OSError):
        super().__init__(f"Failed to write report to {destination}: {cause}")
        self.destination = destination
        self.cause = cause
