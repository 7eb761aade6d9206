from pathlib import Path

import pytest

from schedsim.errors import InvalidProcess, WorkloadError
from schedsim.models import Process
from schedsim.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"name":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"id":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].label == "A"
    assert procs[1].pid == 2
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,name,arrival_time,burst_time,priority\n1,A,0,3,1\n2,,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[1].label == "P2"
    assert procs[1].priority == 0


def test_missing_field(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0}]')
    with pytest.raises(WorkloadError, match="Invalid process entry"):
        load_workload(p)


def test_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("[{")
    with pytest.raises(WorkloadError, match="invalid JSON"):
        load_workload(p)


def test_json_must_be_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": 1}')
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_rows_are_validated(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,0\n")
    with pytest.raises(InvalidProcess):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(WorkloadError, match="Unsupported"):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadError, match="not found"):
        load_workload(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "entry",
    [
        '{"pid":1,"arrival_time":0,"burst_time":2.7}',
        '{"pid":1,"arrival_time":0.9,"burst_time":3}',
        '{"pid":1,"arrival_time":0,"burst_time":true}',
        '{"pid":1,"arrival_time":0,"burst_time":3,"priority":1.5}',
    ],
)
def test_json_rejects_non_integer_times(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_json_accepts_whole_floats(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":1.0,"burst_time":4.0}]')
    assert load_workload(p) == [Process(1, arrival_time=1, burst_time=4)]
