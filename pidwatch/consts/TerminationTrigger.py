from enum import Enum


class TerminationTrigger(Enum):
    PROCESS_EXIT = "process_exit"
    INTERRUPT = "interrupt"
