"""
Rolling-window check-in counts and birthday horizon for reporting.

All functions are pure: same input, same output, no mutation. Records with a
missing or unparseable timestamp are skipped instead of failing the report.
"""
import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from gym_schedule.config import config
from gym_schedule.core.clock import (
    TimezoneLike,
    day_of_week,
    local_datetime,
    local_midnight,
    resolve_timezone,
    to_local,
)

logger = logging.getLogger(__name__)

# Делитель для average_per_day, когда окно не ограничено с обеих сторон
DEFAULT_STATS_WINDOW_DAYS = 7

TimestampLike = Union[datetime, str, None]


@dataclass(frozen=True)
class CheckInRecord:
    id: Any
    member_id: Any
    timestamp: TimestampLike
    member_name: Optional[str] = None
    membership_type: Optional[str] = None
    check_out_time: TimestampLike = None
    class_id: Optional[Any] = None


@dataclass(frozen=True)
class MemberBirthday:
    member_id: Any
    name: str
    date_of_birth: Union[date, str, None]


@dataclass(frozen=True)
class BirthdayMatch:
    member: MemberBirthday
    birthday: date
    days_until: int


def parse_timestamp(value: TimestampLike, tz: TimezoneLike = None) -> Optional[datetime]:
    if isinstance(value, datetime):
        return to_local(value, tz)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_local(datetime.fromisoformat(text), tz)
    except ValueError:
        logger.debug(f"Skipping unparseable check-in timestamp {value!r}")
        return None


def _timestamps(checkins: Iterable[CheckInRecord], tz: TimezoneLike) -> List[Tuple[CheckInRecord, datetime]]:
    stamped = []
    for checkin in checkins:
        moment = parse_timestamp(checkin.timestamp, tz)
        if moment is not None:
            stamped.append((checkin, moment))
    return stamped


def today_count(checkins: Iterable[CheckInRecord], now: datetime, tz: TimezoneLike = None) -> int:
    zone = resolve_timezone(tz)
    start = local_midnight(to_local(now, zone).date(), zone)
    end = start + timedelta(hours=24)
    return sum(1 for _, moment in _timestamps(checkins, zone) if start <= moment < end)


def week_boundary(now: datetime, tz: TimezoneLike = None, boundary_hour: Optional[int] = None) -> datetime:
    """
    Start of the reporting week: Monday at boundary_hour (02:00 by default).

    Late Sunday-night sessions belong to the week that is ending, so on Monday
    before the boundary the previous Monday is returned.
    """
    zone = resolve_timezone(tz)
    if boundary_hour is None:
        boundary_hour = config.WEEK_BOUNDARY_HOUR

    local = to_local(now, zone)
    current_day = day_of_week(local)
    days_back = 6 if current_day == 0 else current_day - 1
    monday = local.date() - timedelta(days=days_back)
    if current_day == 1 and local.hour < boundary_hour:
        monday -= timedelta(days=7)
    return local_datetime(monday, time(hour=boundary_hour), zone)


def weekly_count(checkins: Iterable[CheckInRecord], now: datetime, tz: TimezoneLike = None) -> int:
    zone = resolve_timezone(tz)
    boundary = week_boundary(now, zone)
    return sum(1 for _, moment in _timestamps(checkins, zone) if moment >= boundary)


def month_start(now: datetime, tz: TimezoneLike = None) -> datetime:
    zone = resolve_timezone(tz)
    local = to_local(now, zone)
    return local_midnight(date(local.year, local.month, 1), zone)


def month_to_date_count(
    checkins: Iterable[CheckInRecord],
    member_id: Any,
    now: datetime,
    tz: TimezoneLike = None,
) -> int:
    zone = resolve_timezone(tz)
    boundary = month_start(now, zone)
    return sum(
        1
        for checkin, moment in _timestamps(checkins, zone)
        if checkin.member_id == member_id and moment >= boundary
    )


def total_visits(checkins: Iterable[CheckInRecord], member_id: Any) -> int:
    return sum(1 for checkin in checkins if checkin.member_id == member_id)


def parse_month_day(value: Union[date, str, None]) -> Optional[Tuple[int, int]]:
    """Accepts a date, "YYYY-MM-DD" or "MM-DD"."""
    if isinstance(value, date):
        return value.month, value.day
    if not isinstance(value, str):
        return None

    parts = value.strip()[:10].split("-")
    if len(parts) == 3:
        parts = parts[1:]
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None
    month, day = int(parts[0]), int(parts[1])
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    return month, day


def upcoming_birthdays(
    members: Iterable[MemberBirthday],
    now: datetime,
    horizon_days: Optional[int] = None,
    tz: TimezoneLike = None,
) -> List[BirthdayMatch]:
    """
    Members whose birthday in now's calendar year falls within
    [today, today + horizon_days].

    The year does not wrap: on December 30 a January 2 birthday is not listed.
    Feb 29 birthdays are skipped in non-leap years.
    """
    if horizon_days is None:
        horizon_days = config.BIRTHDAY_HORIZON_DAYS

    today = to_local(now, tz).date()
    horizon = today + timedelta(days=horizon_days)

    matches = []
    for member in members:
        month_day = parse_month_day(member.date_of_birth)
        if month_day is None:
            continue
        try:
            this_year_birthday = date(today.year, month_day[0], month_day[1])
        except ValueError:
            continue
        if today <= this_year_birthday <= horizon:
            matches.append(
                BirthdayMatch(
                    member=member,
                    birthday=this_year_birthday,
                    days_until=(this_year_birthday - today).days,
                )
            )

    matches.sort(key=lambda match: match.days_until)
    return matches


def check_in_statistics(
    checkins: Iterable[CheckInRecord],
    tz: TimezoneLike = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Dict[str, Any]:
    zone = resolve_timezone(tz)
    start = to_local(start, zone) if start else None
    end = to_local(end, zone) if end else None

    window = [
        (checkin, moment)
        for checkin, moment in _timestamps(checkins, zone)
        if (start is None or moment >= start) and (end is None or moment <= end)
    ]

    hourly = Counter(moment.hour for _, moment in window)
    peak_hour, peak_count = 0, 0
    for hour in sorted(hourly):
        if hourly[hour] > peak_count:
            peak_hour, peak_count = hour, hourly[hour]

    total = len(window)
    if start is not None and end is not None:
        # Неполный день считается целым
        window_days = max(math.ceil((end - start).total_seconds() / 86400), 1)
    else:
        window_days = DEFAULT_STATS_WINDOW_DAYS

    return {
        "total_check_ins": total,
        "unique_members": len({checkin.member_id for checkin, _ in window}),
        "peak_hour": peak_hour,
        "peak_hour_count": peak_count,
        "average_per_day": round(total / window_days, 2),
        "hourly_distribution": dict(sorted(hourly.items())),
    }
