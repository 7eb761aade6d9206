import dataclasses

import pytest

from schedsim import run_simulation
from schedsim.errors import InvalidProcess
from schedsim.models import Process, ScheduleItem, validate_processes


def test_process_is_frozen():
    p = Process(1, arrival_time=0, burst_time=3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.burst_time = 1


def test_label_defaults_to_pid():
    assert Process(4, 0, 1).label == "P4"
    assert Process(4, 0, 1, name="editor").label == "editor"


def test_schedule_item_duration():
    assert ScheduleItem(1, 3, 7).duration == 4


def test_validate_accepts_good_table(three_procs):
    assert validate_processes(three_procs) == three_procs


@pytest.mark.parametrize(
    "procs, message",
    [
        ([Process(1, -1, 2)], "arrival_time"),
        ([Process(1, 0, 0)], "burst_time"),
        ([Process(1, 0, 2), Process(1, 1, 2)], "Duplicate"),
        ([], "At least one"),
    ],
)
def test_validate_rejects(procs, message):
    with pytest.raises(InvalidProcess, match=message):
        validate_processes(procs)


def test_result_is_frozen(three_procs):
    result = run_simulation("fcfs", three_procs)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.schedule = []
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.metrics.throughput = 0.0
