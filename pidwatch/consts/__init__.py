"""Enumerations shared across pidwatch."""

from .MemoryMetric import MemoryMetric
from .TerminationTrigger import TerminationTrigger

__all__ = ["MemoryMetric", "TerminationTrigger"]
