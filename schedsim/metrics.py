from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from .errors import EmptySchedule
from .models import Process, ScheduleItem, SchedulingMetrics


def calculate_metrics(schedule: Sequence[ScheduleItem], processes: Sequence[Process]) -> SchedulingMetrics:
    """
    Derive per-process and system metrics from a completed schedule.

    Completion time of a process is the latest end time among its items:
    turnaround = completion - arrival, waiting = turnaround - burst and
    response = first start - arrival. Processes without any item report 0.
    Utilization and throughput are measured against the makespan (the
    latest end time in the whole schedule), so idle time before the first
    arrival counts against utilization.
    """
    if not schedule or not processes:
        raise EmptySchedule()

    items_by_pid: Dict[int, List[ScheduleItem]] = defaultdict(list)
    for item in schedule:
        items_by_pid[item.process_id].append(item)

    waiting_times: Dict[int, int] = {}
    turnaround_times: Dict[int, int] = {}
    response_times: Dict[int, int] = {}

    for p in processes:
        items = items_by_pid.get(p.pid)
        if not items:
            waiting_times[p.pid] = 0
            turnaround_times[p.pid] = 0
            response_times[p.pid] = 0
            continue

        completion_time = max(i.end_time for i in items)
        turnaround_times[p.pid] = completion_time - p.arrival_time
        waiting_times[p.pid] = turnaround_times[p.pid] - p.burst_time
        response_times[p.pid] = min(i.start_time for i in items) - p.arrival_time

    n = len(processes)
    makespan = max(item.end_time for item in schedule)
    total_burst = sum(p.burst_time for p in processes)

    return SchedulingMetrics(
        waiting_times=waiting_times,
        turnaround_times=turnaround_times,
        average_waiting_time=sum(waiting_times.values()) / n,
        average_turnaround_time=sum(turnaround_times.values()) / n,
        cpu_utilization=total_burst / makespan,
        throughput=n / makespan,
        response_times=response_times,
        average_response_time=sum(response_times.values()) / n,
        makespan=makespan,
    )
