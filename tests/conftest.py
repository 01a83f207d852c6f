"""Shared fixtures for domscribr tests."""

from datetime import datetime, timedelta, timezone

import pytest


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return TickingClock(datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc))
