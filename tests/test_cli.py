import json

import pytest

from schedsim.cli import main


@pytest.fixture
def workload(tmp_path):
    path = tmp_path / "workload.json"
    path.write_text(json.dumps([
        {"pid": 1, "arrival_time": 0, "burst_time": 5, "priority": 2},
        {"pid": 2, "arrival_time": 1, "burst_time": 3, "priority": 1},
        {"pid": 3, "arrival_time": 2, "burst_time": 8, "priority": 3},
    ]))
    return path


def test_run(workload, capsys):
    assert main(["run", "-a", "srtf", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Shortest Remaining Time First" in out
    assert "Per-process metrics" in out


def test_run_with_playback(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--step", "--step-delay", "0"]) == 0
    assert "t=15" in capsys.readouterr().out


def test_compare(workload, capsys):
    assert main(["compare", "-w", str(workload), "-a", "fcfs", "round-robin"]) == 0
    assert "Algorithm comparison" in capsys.readouterr().out


def test_export(workload, tmp_path):
    out = tmp_path / "result.csv"
    assert main(["export", "-a", "priority", "-w", str(workload), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8").splitlines()[1] == "1,0,5"


def test_invalid_quantum_exit_code(workload, capsys):
    assert main(["run", "-a", "round-robin", "-w", str(workload), "-q", "0"]) == 2
    assert "quantum" in capsys.readouterr().out


def test_missing_workload_exit_code(tmp_path):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "missing.json")]) == 2


def test_unknown_algorithm_rejected_by_parser(workload):
    with pytest.raises(SystemExit):
        main(["run", "-a", "lottery", "-w", str(workload)])


def test_playback_shows_ready_and_remaining(workload, capsys):
    assert main(["run", "-a", "srtf", "-w", str(workload), "--step", "--step-delay", "0"]) == 0
    out = capsys.readouterr().out
    assert "ready: P1, P3 | remaining: P1=4 P2=2 P3=8" in out


def test_negative_step_delay_rejected_by_parser(workload, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "-a", "fcfs", "-w", str(workload), "--step", "--step-delay", "-1"])
    assert excinfo.value.code == 2
    assert "must be >= 0" in capsys.readouterr().err
