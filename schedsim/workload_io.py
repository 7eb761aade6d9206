from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, List, Mapping

from .errors import WorkloadError
from .models import Process, validate_processes


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of
    Process objects.
    """
    path = Path(path)
    if not path.exists():
        raise WorkloadError(f"Workload not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    return validate_processes(processes)


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping: Mapping[str, Any]) -> Process:
    try:
        pid_val = mapping["pid"] if "pid" in mapping else mapping["id"]
        pid = _as_int(pid_val)
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = _as_int(priority_val) if priority_val not in (None, "") else 0
    except (TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid priority in process entry: {mapping!r}") from exc

    name = mapping.get("name") or ""

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        name=str(name),
    )


def _as_int(value: Any) -> int:
    """
    Whole numbers only: JSON booleans and fractional floats are rejected
    instead of being truncated, so JSON and CSV accept the same values.
    """
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    return int(value)
