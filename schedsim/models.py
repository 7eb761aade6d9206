from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .errors import InvalidProcess


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or f"P{self.pid}"


@dataclass(frozen=True)
class ScheduleItem:
    """
    One contiguous interval of CPU occupancy for a process.
    """

    process_id: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class SchedulingMetrics:
    waiting_times: Dict[int, int]
    turnaround_times: Dict[int, int]
    average_waiting_time: float
    average_turnaround_time: float
    cpu_utilization: float
    throughput: float
    response_times: Dict[int, int] = field(default_factory=dict)
    average_response_time: float = 0.0
    makespan: int = 0

    def summary(self) -> Dict[str, float]:
        """
        Aggregate values only, in display order.
        """
        return {
            "average_waiting_time": self.average_waiting_time,
            "average_turnaround_time": self.average_turnaround_time,
            "average_response_time": self.average_response_time,
            "cpu_utilization": self.cpu_utilization,
            "throughput": self.throughput,
            "makespan": self.makespan,
        }


@dataclass(frozen=True)
class SchedulingResult:
    schedule: List[ScheduleItem]
    metrics: SchedulingMetrics
    algorithm: str = "fcfs"
    quantum: Optional[int] = None


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a process table before it is handed to the engine.

    The algorithms themselves trust their input; loaders and other callers
    run this first so that bad rows fail loudly instead of producing an odd
    schedule.
    """
    checked: List[Process] = []
    seen: set[int] = set()
    for p in processes:
        if p.arrival_time < 0:
            raise InvalidProcess(f"Process {p.label}: arrival_time must be >= 0 (got {p.arrival_time})")
        if p.burst_time <= 0:
            raise InvalidProcess(f"Process {p.label}: burst_time must be > 0 (got {p.burst_time})")
        if p.pid in seen:
            raise InvalidProcess(f"Duplicate process id {p.pid}")
        seen.add(p.pid)
        checked.append(p)

    if not checked:
        raise InvalidProcess("At least one process is required")
    return checked
