"""
Monitor configuration data class.

Holds everything a monitoring run needs besides the fixed sampling cadence.
"""
import signal
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pidwatch.consts.MemoryMetric import MemoryMetric


@dataclass
class MonitorConfig:

    pid: int
    output: Path
    memory_metric: MemoryMetric = MemoryMetric.RSS
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    summary: bool = True
    signals: List[signal.Signals] = field(default_factory=lambda: [signal.SIGINT, signal.SIGTERM])
