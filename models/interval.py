# models/interval.py
"""
interval.py

Half-open reporting window [start, end) plus helpers that build the
daily / weekly / monthly windows the reports screen offers.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from services.errors import InvalidInputError
from utils import config

PERIODS = ("daily", "weekly", "monthly")


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidInputError("Interval end must not be before its start.")

    def contains(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        return self.start <= moment < self.end

    def __contains__(self, moment) -> bool:
        return self.contains(moment)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @classmethod
    def day(cls, moment: datetime) -> Interval:
        start = _start_of_day(moment)
        return cls(start, start + timedelta(days=1))

    @classmethod
    def week(cls, moment: datetime, week_start: int | None = None) -> Interval:
        if week_start is None:
            week_start = config.WEEK_START
        offset = (moment.weekday() - week_start) % 7
        start = _start_of_day(moment) - timedelta(days=offset)
        return cls(start, start + timedelta(days=7))

    @classmethod
    def month(cls, moment: datetime) -> Interval:
        start = _start_of_day(moment).replace(day=1)
        if start.month == 12:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return cls(start, end)

    @classmethod
    def for_period(cls, period: str, moment: datetime) -> Interval:
        period = period.lower()
        if period == "daily":
            return cls.day(moment)
        if period == "weekly":
            return cls.week(moment)
        if period == "monthly":
            return cls.month(moment)
        raise InvalidInputError(f"Unknown period {period!r}; expected one of {PERIODS}")
