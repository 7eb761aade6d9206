from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence

from .errors import InvalidQuantum
from .metrics import calculate_metrics
from .models import Process, ScheduleItem, SchedulingResult

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_ALGORITHM = "fcfs"


@dataclass
class _Job:
    """
    Working copy of a process for the preemptive algorithms. Only the
    remaining time changes; caller-owned Process records are never touched.
    """

    pid: int
    arrival_time: int
    remaining_time: int


def _jobs_by_arrival(processes: Iterable[Process]) -> List[_Job]:
    jobs = [_Job(pid=p.pid, arrival_time=p.arrival_time, remaining_time=p.burst_time) for p in processes]
    # list.sort is stable: equal arrivals keep their input order.
    jobs.sort(key=lambda j: j.arrival_time)
    return jobs


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ScheduleItem]:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    time = 0
    schedule: List[ScheduleItem] = []

    for p in processes_sorted:
        if time < p.arrival_time:
            logger.debug("FCFS: CPU idle from t=%d to t=%d", time, p.arrival_time)
            time = p.arrival_time

        schedule.append(ScheduleItem(process_id=p.pid, start_time=time, end_time=time + p.burst_time))
        time += p.burst_time

    return schedule


def _schedule_non_preemptive(
    processes: Sequence[Process],
    key: Callable[[Process], int],
    label: str,
) -> List[ScheduleItem]:
    """
    Shared loop for SJF and static Priority.

    At each decision point, among pending processes that have arrived, run
    the one with the smallest key to completion. min() returns the first of
    several equal candidates, so ties go to whichever process comes first in
    the pending list (input order), not to the earliest arrival or lowest id.
    """
    pending: List[Process] = list(processes)

    time = 0
    schedule: List[ScheduleItem] = []

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            # Nothing has arrived yet; jump to the next arrival.
            time = min(p.arrival_time for p in pending)
            continue

        p = min(ready, key=key)
        logger.debug("%s: t=%d picked %s from %d ready", label, time, p.label, len(ready))

        schedule.append(ScheduleItem(process_id=p.pid, start_time=time, end_time=time + p.burst_time))
        time += p.burst_time
        pending.remove(p)

    return schedule


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ScheduleItem]:
    """
    Shortest Job First (non-preemptive), keyed on total burst time.
    """
    return _schedule_non_preemptive(processes, key=lambda p: p.burst_time, label="SJF")


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ScheduleItem]:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority.
    """
    return _schedule_non_preemptive(processes, key=lambda p: p.priority, label="Priority")


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> List[ScheduleItem]:
    """
    Round Robin scheduling with a fixed time quantum.

    Arrivals are admitted to the ready queue twice per slice: once after the
    head is dequeued and once after it has run. A process arriving exactly
    when a slice ends is therefore queued ahead of the preempted process.
    Every slice becomes its own ScheduleItem, even when the same process
    runs twice in a row.
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum < 1:
        raise InvalidQuantum(quantum)

    incoming: Deque[_Job] = deque(_jobs_by_arrival(processes))
    schedule: List[ScheduleItem] = []
    if not incoming:
        return schedule

    total = len(incoming)
    completed = 0

    time = 0
    if incoming[0].arrival_time > 0:
        time = incoming[0].arrival_time

    ready: Deque[_Job] = deque([incoming.popleft()])

    def admit_arrivals(current_time: int) -> None:
        while incoming and incoming[0].arrival_time <= current_time:
            ready.append(incoming.popleft())

    while completed < total:
        if not ready:
            if not incoming:
                break
            # CPU idle: jump to the next arrival.
            time = incoming[0].arrival_time
            ready.append(incoming.popleft())
            continue

        job = ready.popleft()
        admit_arrivals(time)

        run_time = min(quantum, job.remaining_time)
        schedule.append(ScheduleItem(process_id=job.pid, start_time=time, end_time=time + run_time))
        time += run_time
        job.remaining_time -= run_time

        admit_arrivals(time)

        if job.remaining_time > 0:
            ready.append(job)
        else:
            logger.debug("RR: P%d completed at t=%d", job.pid, time)
            completed += 1

    return schedule


def schedule_srtf(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ScheduleItem]:
    """
    Shortest Remaining Time First (preemptive SJF).

    Event driven rather than tick driven: the clock only stops at arrivals
    and completions. The CPU is either idle (running is None) or running a
    job since slice_start; an item is emitted when the running job is
    preempted or completes.
    """
    jobs = _jobs_by_arrival(processes)
    schedule: List[ScheduleItem] = []

    time = 0
    if jobs and jobs[0].arrival_time > 0:
        time = jobs[0].arrival_time

    running: Optional[_Job] = None
    slice_start = time

    while any(j.remaining_time > 0 for j in jobs):
        available = [j for j in jobs if j.arrival_time <= time and j.remaining_time > 0]

        if not available:
            time = min(j.arrival_time for j in jobs if j.remaining_time > 0)
            continue

        # First of several equal remaining times wins (arrival order scan).
        selected = min(available, key=lambda j: j.remaining_time)

        if running is None:
            slice_start = time
        elif selected is not running:
            logger.debug("SRTF: t=%d P%d preempts P%d", time, selected.pid, running.pid)
            schedule.append(ScheduleItem(process_id=running.pid, start_time=slice_start, end_time=time))
            slice_start = time

        running = selected

        next_event = time + selected.remaining_time
        upcoming = [j.arrival_time for j in jobs if j.arrival_time > time and j.remaining_time > 0]
        if upcoming:
            next_event = min(next_event, min(upcoming))

        selected.remaining_time -= next_event - time

        if selected.remaining_time == 0:
            schedule.append(ScheduleItem(process_id=selected.pid, start_time=slice_start, end_time=next_event))
            running = None

        time = next_event

    return schedule


ALGORITHMS: Dict[str, Callable[..., List[ScheduleItem]]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "round-robin": schedule_rr,
    "srtf": schedule_srtf,
}

ALGORITHM_NAMES: Dict[str, str] = {
    "fcfs": "First Come First Served",
    "sjf": "Shortest Job First (non-preemptive)",
    "priority": "Priority (non-preemptive)",
    "round-robin": "Round Robin",
    "srtf": "Shortest Remaining Time First",
}


def run_simulation(
    algorithm: str,
    processes: Iterable[Process],
    quantum: Optional[int] = DEFAULT_QUANTUM,
) -> SchedulingResult:
    """
    Dispatch to the requested algorithm and compute metrics for its schedule.

    Unknown identifiers run FCFS instead of failing; callers that need
    strict validation should check against ALGORITHMS first. The quantum is
    only used by round-robin.
    """
    if algorithm not in ALGORITHMS:
        logger.warning("Unknown algorithm %r, falling back to %s", algorithm, DEFAULT_ALGORITHM)
        algorithm = DEFAULT_ALGORITHM

    if quantum is None:
        quantum = DEFAULT_QUANTUM

    processes = list(processes)
    func = ALGORITHMS[algorithm]
    schedule = func(processes, quantum=quantum)
    logger.debug("%s produced %d schedule items for %d processes", algorithm, len(schedule), len(processes))

    return SchedulingResult(
        schedule=schedule,
        metrics=calculate_metrics(schedule, processes),
        algorithm=algorithm,
        quantum=quantum if algorithm == "round-robin" else None,
    )
