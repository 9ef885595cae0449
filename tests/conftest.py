from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def start_time() -> datetime:
    return datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time: datetime) -> FakeClock:
    return FakeClock(start_time)
