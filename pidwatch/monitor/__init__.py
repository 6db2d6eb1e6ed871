"""Sampling, aggregation and shutdown of a single process monitor."""

from .process_status import ProcessStatus
from .status_snapshot import StatusSnapshot

__all__ = ["ProcessStatus", "StatusSnapshot"]
