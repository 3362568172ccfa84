"""
Time source and operating-timezone helpers.

Every wall-clock boundary (today, week start, month start) is computed in the
single operating timezone from config.
"""
from datetime import date, datetime, time, timezone
from typing import Optional, Union

import pytz

from gym_schedule.config import config

TimezoneLike = Union[str, pytz.BaseTzInfo, None]


def resolve_timezone(tz: TimezoneLike = None) -> pytz.BaseTzInfo:
    if tz is None:
        return pytz.timezone(config.OPERATING_TIMEZONE)
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def to_local(dt: datetime, tz: TimezoneLike = None) -> datetime:
    """
    Naive datetimes are treated as operating-local wall-clock time,
    aware ones are converted.
    """
    zone = resolve_timezone(tz)
    if dt.tzinfo is None:
        return zone.localize(dt)
    return dt.astimezone(zone)


def local_midnight(day: date, tz: TimezoneLike = None) -> datetime:
    return resolve_timezone(tz).localize(datetime.combine(day, time.min))


def local_datetime(day: date, at: time, tz: TimezoneLike = None) -> datetime:
    return resolve_timezone(tz).localize(datetime.combine(day, at))


def day_of_week(dt: datetime) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (dt.weekday() + 1) % 7


class Clock:
    def __init__(self, tz: TimezoneLike = None):
        self.tz = resolve_timezone(tz)

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.tz)


class FixedClock(Clock):
    """Clock pinned to one instant, for tests and replays."""

    def __init__(self, instant: datetime, tz: TimezoneLike = None):
        super().__init__(tz)
        self._instant = to_local(instant, self.tz)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = to_local(instant, self.tz)


def get_system_clock(tz_name: Optional[str] = None) -> Clock:
    return SystemClock(tz_name or config.OPERATING_TIMEZONE)
