from datetime import datetime, timedelta, timezone

import pytest

from src.history.graph import CommitGraph


class TickingClock:
    """Returns a new instant one second later on every call."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def graph(clock):
    return CommitGraph(clock=clock)
