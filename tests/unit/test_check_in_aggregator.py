from datetime import date, datetime

import pytest
import pytz

from gym_schedule.services.check_in_aggregator import (
    CheckInRecord,
    MemberBirthday,
    check_in_statistics,
    month_to_date_count,
    parse_month_day,
    parse_timestamp,
    today_count,
    total_visits,
    upcoming_birthdays,
    week_boundary,
    weekly_count,
)


def visit(record_id, member_id, timestamp):
    return CheckInRecord(id=record_id, member_id=member_id, timestamp=timestamp)


class TestWeekBoundary:
    def test_midweek_goes_back_to_monday_two_am(self):
        boundary = week_boundary(datetime(2026, 10, 21, 15, 0), "UTC")

        assert boundary.replace(tzinfo=None) == datetime(2026, 10, 19, 2, 0)

    def test_sunday_goes_back_six_days(self):
        boundary = week_boundary(datetime(2026, 10, 25, 23, 0), "UTC")

        assert boundary.replace(tzinfo=None) == datetime(2026, 10, 19, 2, 0)

    def test_monday_before_two_am_belongs_to_previous_week(self):
        boundary = week_boundary(datetime(2026, 10, 26, 1, 30), "UTC")

        assert boundary.replace(tzinfo=None) == datetime(2026, 10, 19, 2, 0)

    def test_monday_after_two_am_starts_new_week(self):
        boundary = week_boundary(datetime(2026, 10, 26, 2, 0), "UTC")

        assert boundary.replace(tzinfo=None) == datetime(2026, 10, 26, 2, 0)

    def test_boundary_is_local(self):
        boundary = week_boundary(datetime(2026, 10, 21, 15, 0), "Europe/Warsaw")

        assert boundary.tzinfo is not None
        assert boundary.hour == 2
        assert boundary.utcoffset().total_seconds() == 2 * 3600


def test_late_sunday_sessions_count_toward_previous_week():
    checkins = [
        visit(1, 1, datetime(2026, 10, 20, 18, 0)),
        visit(2, 2, datetime(2026, 10, 25, 23, 0)),
        visit(3, 3, datetime(2026, 10, 26, 1, 30)),
    ]

    # Понедельник 01:45: неделя ещё не закончилась, все три визита в ней
    assert weekly_count(checkins, datetime(2026, 10, 26, 1, 45), "UTC") == 3

    # После 02:00 начинается новая неделя, воскресные и ночные визиты остаются в старой
    assert weekly_count(checkins, datetime(2026, 10, 26, 9, 0), "UTC") == 0


class TestTodayCount:
    def test_counts_local_calendar_day(self):
        checkins = [
            visit(1, 1, datetime(2026, 10, 19, 0, 0)),
            visit(2, 2, datetime(2026, 10, 19, 23, 59)),
            visit(3, 3, datetime(2026, 10, 18, 23, 59)),
            visit(4, 4, datetime(2026, 10, 20, 0, 0)),
        ]

        assert today_count(checkins, datetime(2026, 10, 19, 12, 0), "UTC") == 2

    def test_aware_timestamps_are_converted(self):
        # 23:30 UTC уже следующий день в Варшаве
        checkins = [visit(1, 1, pytz.utc.localize(datetime(2026, 10, 18, 23, 30)))]

        assert today_count(checkins, datetime(2026, 10, 19, 12, 0), "Europe/Warsaw") == 1

    def test_string_timestamps(self):
        checkins = [
            visit(1, 1, "2026-10-19T08:00:00Z"),
            visit(2, 2, "2026-10-19T09:00:00+00:00"),
        ]

        assert today_count(checkins, datetime(2026, 10, 19, 12, 0), "UTC") == 2

    def test_bad_timestamps_are_skipped(self):
        checkins = [
            visit(1, 1, None),
            visit(2, 2, "not a date"),
            visit(3, 3, ""),
            visit(4, 4, datetime(2026, 10, 19, 8, 0)),
        ]

        assert today_count(checkins, datetime(2026, 10, 19, 12, 0), "UTC") == 1


class TestMemberCounts:
    checkins = [
        visit(1, 7, datetime(2026, 9, 30, 20, 0)),
        visit(2, 7, datetime(2026, 10, 1, 0, 0)),
        visit(3, 7, datetime(2026, 10, 15, 7, 0)),
        visit(4, 8, datetime(2026, 10, 15, 7, 0)),
        visit(5, 7, "garbage"),
    ]

    def test_month_to_date(self):
        assert month_to_date_count(self.checkins, 7, datetime(2026, 10, 19, 12, 0), "UTC") == 2

    def test_total_visits_is_unconditional(self):
        assert total_visits(self.checkins, 7) == 4
        assert total_visits(self.checkins, 99) == 0


class TestUpcomingBirthdays:
    members = [MemberBirthday(member_id=1, name="Anna", date_of_birth="12-25")]

    def test_birthday_within_horizon(self):
        matches = upcoming_birthdays(self.members, datetime(2026, 12, 20, 10, 0), 7, "UTC")

        assert len(matches) == 1
        assert matches[0].birthday == date(2026, 12, 25)
        assert matches[0].days_until == 5

    def test_no_year_wrap(self):
        assert upcoming_birthdays(self.members, datetime(2026, 12, 30, 10, 0), 7, "UTC") == []

    def test_january_birthday_not_carried_from_december(self):
        members = [MemberBirthday(member_id=2, name="Boris", date_of_birth=date(1990, 1, 2))]

        assert upcoming_birthdays(members, datetime(2026, 12, 30, 10, 0), 7, "UTC") == []

    def test_birthday_today_is_included(self):
        matches = upcoming_birthdays(self.members, datetime(2026, 12, 25, 18, 0), 7, "UTC")

        assert [m.days_until for m in matches] == [0]

    def test_sorted_and_skips_unusable_dates(self):
        members = [
            MemberBirthday(member_id=1, name="Late", date_of_birth="1990-10-24"),
            MemberBirthday(member_id=2, name="Soon", date_of_birth=date(1985, 10, 20)),
            MemberBirthday(member_id=3, name="Unknown", date_of_birth=None),
            MemberBirthday(member_id=4, name="Broken", date_of_birth="31/12"),
            MemberBirthday(member_id=5, name="Leap", date_of_birth="02-29"),
        ]

        matches = upcoming_birthdays(members, datetime(2026, 10, 19, 9, 0), 7, "UTC")

        assert [m.member.name for m in matches] == ["Soon", "Late"]

    def test_default_horizon_is_seven_days(self):
        members = [
            MemberBirthday(member_id=1, name="In", date_of_birth="10-26"),
            MemberBirthday(member_id=2, name="Out", date_of_birth="10-27"),
        ]

        matches = upcoming_birthdays(members, datetime(2026, 10, 19, 9, 0), tz="UTC")

        assert [m.member.name for m in matches] == ["In"]


@pytest.mark.parametrize(
    "value, expected",
    [("12-25", (12, 25)), ("1990-02-03", (2, 3)), (date(2000, 7, 4), (7, 4)), ("13-01", None), ("", None), (None, None)],
)
def test_parse_month_day(value, expected):
    assert parse_month_day(value) == expected


def test_parse_timestamp_naive_string_is_local():
    parsed = parse_timestamp("2026-10-19T08:00:00", "Europe/Warsaw")

    assert parsed.hour == 8
    assert parsed.utcoffset().total_seconds() == 2 * 3600


def test_check_in_statistics():
    checkins = [
        visit(1, 1, datetime(2026, 10, 19, 7, 10)),
        visit(2, 2, datetime(2026, 10, 19, 7, 50)),
        visit(3, 1, datetime(2026, 10, 20, 18, 5)),
        visit(4, 3, datetime(2026, 10, 10, 7, 0)),
        visit(5, 4, "broken"),
    ]

    stats = check_in_statistics(
        checkins,
        "UTC",
        start=datetime(2026, 10, 14, 0, 0),
        end=datetime(2026, 10, 21, 0, 0),
    )

    assert stats == {
        "total_check_ins": 3,
        "unique_members": 2,
        "peak_hour": 7,
        "peak_hour_count": 2,
        "average_per_day": 0.43,
        "hourly_distribution": {7: 2, 18: 1},
    }


def test_average_per_day_follows_window_length():
    checkins = [visit(i, i, datetime(2026, 10, 19, 8, i)) for i in range(3)]

    two_days = check_in_statistics(checkins, "UTC", start=datetime(2026, 10, 18, 0, 0), end=datetime(2026, 10, 20, 0, 0))
    open_ended = check_in_statistics(checkins, "UTC", start=datetime(2026, 10, 18, 0, 0))

    assert two_days["average_per_day"] == 1.5
    assert open_ended["average_per_day"] == 0.43


def test_check_in_statistics_empty():
    stats = check_in_statistics([], "UTC")

    assert stats["total_check_ins"] == 0
    assert stats["peak_hour_count"] == 0
    assert stats["hourly_distribution"] == {}


def test_aggregates_are_deterministic():
    checkins = [visit(i, i % 3, datetime(2026, 10, 19, i % 24, 0)) for i in range(30)]
    now = datetime(2026, 10, 19, 23, 0)

    first = (today_count(checkins, now, "UTC"), weekly_count(checkins, now, "UTC"))
    second = (today_count(list(reversed(checkins)), now, "UTC"), weekly_count(checkins, now, "UTC"))

    assert first == second
