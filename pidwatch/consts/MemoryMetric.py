from enum import Enum


class MemoryMetric(Enum):
    RSS = "rss"  # Resident Set Size (physical memory)
    VMS = "vms"
    USS = "uss"  # Unique Set Size, needs memory_full_info()
