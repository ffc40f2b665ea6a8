from datetime import datetime, timedelta

import pytest

from data.order_store import OrderStore
from services.report_service import ReportingEngine

START = datetime(2025, 5, 12, 9, 0, 0)


class FakeClock:
    # Returns a fixed "now" that only moves when a test moves it.

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self.now += timedelta(seconds=seconds, **kwargs)
        return self.now

    def set(self, moment: datetime) -> datetime:
        self.now = moment
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return OrderStore(clock=clock)


@pytest.fixture
def reports(store):
    return ReportingEngine(store)
