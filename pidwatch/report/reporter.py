"""
Report writer.

Serializes the final status into the fixed four-line text layout:

    Memory Max: <bytes>
    Cpu Max: <percent>
    <memory samples, comma separated>
    <cpu samples, comma separated>
"""
import os
from pathlib import Path
from typing import Iterable

from pidwatch.exceptions import ReportWriteError
from pidwatch.monitor.status_snapshot import StatusSnapshot
from pidwatch.util.log_config import setup_logger

logger = setup_logger(__name__)


def _join(values: Iterable) -> str:
    return ",".join(str(v) for v in values)


class Reporter:

    def format(self, snapshot: StatusSnapshot) -> str:
        lines = [
            f"Memory Max: {int(snapshot.memory_max)}",
            f"Cpu Max: {float(snapshot.cpu_max)}",
            _join(int(m) for m in snapshot.memory_usage),
            _join(float(c) for c in snapshot.cpu_usage),
        ]
        return "".join(line + "\n" for line in lines)

    def write(self, snapshot: StatusSnapshot, destination: Path) -> Path:
        """
        Write the report, creating or truncating the destination.

        Args:
            snapshot: Final status
            destination: Report file path

        Returns:
            Path of the written report

        Raises:
            ReportWriteError: destination could not be written
        """
        destination = Path(destination)
        content = self.format(snapshot)
        try:
            with open(destination, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise ReportWriteError(destination, e) from e

        logger.info(f"Report written to {destination} ({snapshot.samples_count} samples)")
        return destination
