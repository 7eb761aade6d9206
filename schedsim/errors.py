from __future__ import annotations


class SchedulerError(ValueError):
    """
    Base class for errors raised by the simulator.

    Subclasses ValueError so callers catching bad input keep working.
    """


class InvalidQuantum(SchedulerError):
    def __init__(self, quantum) -> None:
        super().__init__(f"Round Robin requires an integer quantum >= 1 (got {quantum!r})")
        self.quantum = quantum


class EmptySchedule(SchedulerError):
    def __init__(self) -> None:
        super().__init__("Cannot compute metrics for an empty schedule")


class InvalidProcess(SchedulerError):
    pass


class WorkloadError(SchedulerError):
    pass
