from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class StatusSnapshot:
    """Consistent copy of the aggregated samples"""
    memory_max: int
    cpu_max: float
    memory_usage: Tuple[int, ...]
    cpu_usage: Tuple[float, ...]

    @property
    def samples_count(self) -> int:
        return len(self.memory_usage)

    @property
    def avg_cpu_percent(self) -> float:
        if not self.cpu_usage:
            return 0.0
        return sum(self.cpu_usage) / len(self.cpu_usage)

    def to_dict(self) -> Dict:
        """Summary statistics plus the raw samples"""
        return {
            'memory_max': self.memory_max,
            'cpu_max': self.cpu_max,
            'avg_cpu_percent': self.avg_cpu_percent,
            'samples_count': self.samples_count,
            'memory_usage': list(self.memory_usage),
            'cpu_usage': list(self.cpu_usage),
        }
