from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .gantt import process_labels, render_gantt
from .models import Process, SchedulingResult

EXPORT_FORMATS = ("csv", "text")


def metric_rows(result: SchedulingResult) -> List[Tuple[str, object]]:
    """
    Flatten result.metrics into (key, value) pairs: aggregates first, then
    the per-process maps keyed as name[pid].
    """
    metrics = result.metrics
    rows: List[Tuple[str, object]] = list(metrics.summary().items())
    for key, values in (
        ("waiting_time", metrics.waiting_times),
        ("turnaround_time", metrics.turnaround_times),
        ("response_time", metrics.response_times),
    ):
        rows.extend((f"{key}[{pid}]", value) for pid, value in values.items())
    return rows


def result_to_csv(result: SchedulingResult) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow(["Process ID", "Start Time", "End Time"])
    for item in result.schedule:
        writer.writerow([item.process_id, item.start_time, item.end_time])

    writer.writerow([])
    writer.writerow(["Metric", "Value"])
    for key, value in metric_rows(result):
        writer.writerow([key, value])

    return buf.getvalue()


def report_lines(result: SchedulingResult, processes: Optional[Iterable[Process]] = None) -> List[str]:
    """
    Text report of a result. When processes are given, the Gantt chart uses
    their names instead of bare ids.
    """
    lines = ["CPU Scheduling Report", f"Algorithm: {result.algorithm}"]
    if result.quantum is not None:
        lines.append(f"Quantum: {result.quantum}")

    lines += ["", "Schedule:"]
    for index, item in enumerate(result.schedule, start=1):
        lines.append(
            f"#{index} - Process ID: {item.process_id}, Start Time: {item.start_time}, End Time: {item.end_time}"
        )

    lines += ["", "Metrics:"]
    lines += [f"{key}: {value}" for key, value in metric_rows(result)]

    labels = process_labels(processes) if processes is not None else None
    lines += [""] + render_gantt(result.schedule, labels).splitlines()
    return lines


def write_export(
    result: SchedulingResult,
    path: str | Path,
    fmt: str = "csv",
    processes: Optional[Iterable[Process]] = None,
) -> Path:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format {fmt!r} (use one of {', '.join(EXPORT_FORMATS)})")

    path = Path(path)
    if fmt == "csv":
        content = result_to_csv(result)
    else:
        content = "\n".join(report_lines(result, processes)) + "\n"

    path.write_text(content, encoding="utf-8")
    return path
