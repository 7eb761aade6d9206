import pytest

from schedsim.models import Process


@pytest.fixture
def three_procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


@pytest.fixture
def mixed_procs():
    # Overlapping arrivals, equal bursts and an idle gap before P5.
    return [
        Process(1, arrival_time=0, burst_time=7, priority=3),
        Process(2, arrival_time=2, burst_time=4, priority=1),
        Process(3, arrival_time=4, burst_time=1, priority=4),
        Process(4, arrival_time=5, burst_time=4, priority=2),
        Process(5, arrival_time=20, burst_time=3, priority=1),
        Process(6, arrival_time=21, burst_time=2, priority=0),
    ]
