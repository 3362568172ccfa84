from datetime import date, datetime

import pytz

from gym_schedule.core.clock import FixedClock, SystemClock, day_of_week, local_midnight, to_local


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2026, 10, 18)) == 0
    assert day_of_week(date(2026, 10, 19)) == 1
    assert day_of_week(datetime(2026, 10, 17, 12, 0)) == 6


def test_naive_datetime_is_local_wall_clock():
    local = to_local(datetime(2026, 10, 19, 8, 0), "Europe/Warsaw")

    assert local.hour == 8
    assert local.utcoffset().total_seconds() == 2 * 3600


def test_aware_datetime_is_converted():
    local = to_local(pytz.utc.localize(datetime(2026, 10, 19, 8, 0)), "Europe/Warsaw")

    assert local.hour == 10


def test_local_midnight_across_dst_change():
    # 25 октября 2026 Варшава переходит на зимнее время
    assert local_midnight(date(2026, 10, 25), "Europe/Warsaw").utcoffset().total_seconds() == 2 * 3600
    assert local_midnight(date(2026, 10, 26), "Europe/Warsaw").utcoffset().total_seconds() == 1 * 3600


def test_fixed_clock():
    clock = FixedClock(datetime(2026, 10, 19, 5, 0), "UTC")

    assert clock.now() == pytz.utc.localize(datetime(2026, 10, 19, 5, 0))
    assert clock.today() == date(2026, 10, 19)

    clock.set(datetime(2026, 10, 20, 9, 0))
    assert clock.today() == date(2026, 10, 20)


def test_system_clock_is_aware():
    assert SystemClock("UTC").now().tzinfo is not None
