"""Shared pytest fixtures for the srt_player test suite."""

import pytest

from srt_player.timeline import Cue, ManualFrameScheduler, TimelineEngine


SAMPLE_SRT = """1
00:00:00,000 --> 00:00:04,000
First line

2
00:00:05,000 --> 00:00:09,500
Second line
continues here

3
00:00:10,000 --> 00:00:12,000
Third line
"""


class FakeClock:
    """Monotonic clock that only moves when advanced."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def three_cues():
    return [
        Cue(start=0.0, end=4.0, text="zero"),
        Cue(start=5.0, end=9.0, text="five"),
        Cue(start=10.0, end=12.0, text="ten"),
    ]


@pytest.fixture
def changes():
    """List collecting (text, cue) pairs from on_cue_change."""
    return []


@pytest.fixture
def engine(three_cues, scheduler, clock, changes):
    return TimelineEngine(
        three_cues,
        scheduler=scheduler,
        clock=clock,
        on_cue_change=lambda text, cue: changes.append((text, cue)),
    )
