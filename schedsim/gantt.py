from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Process, ScheduleItem

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def process_labels(processes: Iterable[Process]) -> Dict[int, str]:
    return {p.pid: p.label for p in processes}


def _label(item: ScheduleItem, labels: Optional[Mapping[int, str]]) -> str:
    if labels and item.process_id in labels:
        return labels[item.process_id]
    return f"P{item.process_id}"


def item_at(schedule: Sequence[ScheduleItem], t: int) -> Optional[ScheduleItem]:
    """
    Return the item occupying the CPU at time t, or None when idle.

    Playback only looks things up in an already computed schedule.
    """
    for item in schedule:
        if item.start_time <= t < item.end_time:
            return item
        if item.start_time > t:
            break
    return None


def render_gantt(schedule: Sequence[ScheduleItem], labels: Optional[Mapping[int, str]] = None) -> str:
    """
    Plain-text Gantt chart, used by the text report.
    """
    if not schedule:
        return "(no execution)"

    line = "|"
    row_labels = ""
    time_marks = "0"
    last_time = 0

    for item in schedule:
        idle_gap = item.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            row_labels += " " * idle_gap
            last_time = item.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, item.duration)
        line += "=" * width
        row_labels += _label(item, labels)[:width].ljust(width)
        last_time = item.end_time
        time_marks += f"{last_time:>3}"

    line += "|"

    return "\n".join(["Gantt Chart:", line, row_labels, time_marks])


def build_rich_gantt(
    schedule: Sequence[ScheduleItem],
    labels: Optional[Mapping[int, str]] = None,
) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not schedule:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text()
    row_labels = Text()
    time_marks = "0"
    last_time = 0

    for item in schedule:
        idle_gap = item.start_time - last_time
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            row_labels.append(" " * idle_gap)
            last_time = item.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, item.duration)
        timeline.append(" " * width, style=f"on {pid_color(item.process_id)}")
        row_labels.append(_label(item, labels)[:width].ljust(width), style="bold")

        last_time = item.end_time
        time_marks += f"{last_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(row_labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks


@dataclass(frozen=True)
class PlaybackFrame:
    """
    What the CPU is doing at one time unit of a computed schedule.

    remaining holds each process's burst left at the start of the unit.
    ready lists the pids that have arrived, are unfinished and are not
    running, in the order the algorithm would consider them. slice_used is
    how far into the current item the running process is.
    """

    time: int
    running: Optional[int]
    label: str
    progress: int
    slice_used: int
    remaining: Dict[int, int]
    ready: List[int]
    explanation: str


def _remaining_at(schedule: Sequence[ScheduleItem], processes: Sequence[Process], t: int) -> Dict[int, int]:
    used: Dict[int, int] = {p.pid: 0 for p in processes}
    for item in schedule:
        if item.start_time >= t:
            break
        if item.process_id in used:
            used[item.process_id] += min(item.end_time, t) - item.start_time
    return {p.pid: max(0, p.burst_time - used[p.pid]) for p in processes}


def frame_at(
    schedule: Sequence[ScheduleItem],
    processes: Sequence[Process],
    t: int,
    algorithm: str = "fcfs",
    quantum: Optional[int] = None,
) -> PlaybackFrame:
    """
    Rebuild the state at time t from the schedule alone. The algorithm name
    only decides how the ready list is ordered.
    """
    item = item_at(schedule, t)
    remaining = _remaining_at(schedule, processes, t)
    labels = process_labels(processes)
    running = item.process_id if item is not None else None

    waiting = sorted(
        (p for p in processes if p.arrival_time <= t and remaining[p.pid] > 0 and p.pid != running),
        key=lambda p: p.arrival_time,
    )
    if algorithm == "sjf":
        waiting.sort(key=lambda p: p.burst_time)
    elif algorithm == "priority":
        waiting.sort(key=lambda p: p.priority)
    elif algorithm == "srtf":
        waiting.sort(key=lambda p: remaining[p.pid])
    ready = [p.pid for p in waiting]

    if item is None:
        label, progress, slice_used = "[idle]", 0, 0
        explanation = "CPU is idle."
    else:
        label = _label(item, labels)
        slice_used = t - item.start_time
        progress = slice_used + 1
        explanation = f"{label} is running with {remaining[item.process_id]} time units remaining."
        if algorithm == "round-robin" and quantum:
            explanation += (
                f" It has used {slice_used} of its {quantum} time quantum with {quantum - slice_used} remaining."
            )

    if not ready:
        explanation += " The ready queue is empty."
    elif len(ready) == 1:
        explanation += " There is 1 process in the ready queue."
    else:
        explanation += f" There are {len(ready)} processes in the ready queue."

    return PlaybackFrame(
        time=t,
        running=running,
        label=label,
        progress=progress,
        slice_used=slice_used,
        remaining=remaining,
        ready=ready,
        explanation=explanation,
    )


def playback_frames(
    schedule: Sequence[ScheduleItem],
    processes: Sequence[Process],
    algorithm: str = "fcfs",
    quantum: Optional[int] = None,
) -> List[PlaybackFrame]:
    """
    One frame per time unit up to the makespan. Frames are derived from the
    finished schedule; the algorithm is never re-run.
    """
    if not schedule:
        return []

    processes = list(processes)
    makespan = max(item.end_time for item in schedule)
    return [frame_at(schedule, processes, t, algorithm, quantum) for t in range(makespan)]
