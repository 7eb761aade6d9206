"""
CPU scheduling simulator.

Runs classical uniprocessor scheduling disciplines (FCFS, SJF, Priority,
Round Robin, SRTF) over a set of processes and reports the resulting
schedule together with its performance metrics.
"""

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_simulation
from .errors import EmptySchedule, InvalidProcess, InvalidQuantum, SchedulerError, WorkloadError
from .metrics import calculate_metrics
from .models import Process, ScheduleItem, SchedulingMetrics, SchedulingResult

__all__ = [
    "ALGORITHMS",
    "DEFAULT_QUANTUM",
    "EmptySchedule",
    "InvalidProcess",
    "InvalidQuantum",
    "Process",
    "ScheduleItem",
    "SchedulerError",
    "SchedulingMetrics",
    "SchedulingResult",
    "WorkloadError",
    "calculate_metrics",
    "run_simulation",
]
