from dataclasses import replace
from datetime import date, datetime

import pytest
import pytz

from gym_schedule.core.result import ErrorKind
from gym_schedule.models import ActivityType, BookingStatus, ClassStatus
from gym_schedule.services.enrollment_ledger import (
    RosterEntry,
    active_count,
    available_spots,
    cancel,
    check_in_to_class,
    enroll,
)
from gym_schedule.services.schedule_resolver import OccurrenceKey

NOW = pytz.utc.localize(datetime(2026, 10, 19, 5, 0))
KEY = OccurrenceKey(class_id=1, date=date(2026, 10, 19), start_time="06:00")


def booking(booking_id, member_id, status=BookingStatus.CONFIRMED, key=KEY):
    return RosterEntry(
        id=booking_id,
        class_id=key.class_id,
        member_id=member_id,
        booking_date=key.date,
        start_time=key.start_time,
        status=status,
    )


def apply(roster, entry):
    """Имитирует сохранение: новая запись получает id, изменённая заменяет старую."""
    if entry.id is None:
        return roster + [replace(entry, id=len(roster) + 1)]
    return [entry if existing.id == entry.id else existing for existing in roster]


class TestEnroll:
    def test_success_produces_confirmed_booking_and_activity(self):
        result = enroll(KEY, 10, [], 2, NOW, member_name="Anna Kowalska")

        assert result.ok
        new_booking = result.value.booking
        assert new_booking.status == BookingStatus.CONFIRMED
        assert new_booking.member_id == 10
        assert new_booking.created_at == NOW
        assert new_booking.key == KEY

        activity = result.value.activity
        assert activity.type == ActivityType.ENROLLMENT
        assert activity.metadata == {"classId": 1, "occurrenceKey": "1:2026-10-19:06:00"}
        assert "Anna Kowalska" in activity.message

    def test_inactive_class_is_unavailable(self):
        result = enroll(KEY, 10, [], 2, NOW, class_status=ClassStatus.INACTIVE)

        assert result.error.kind == ErrorKind.CLASS_UNAVAILABLE

    def test_full_status_closes_enrollment(self):
        # Пустой список записей не важен: статус "full" закрывает запись
        result = enroll(KEY, 10, [], 2, NOW, class_status=ClassStatus.FULL)

        assert result.error.kind == ErrorKind.CLASS_UNAVAILABLE

    def test_free_spot_does_not_reopen_full_class(self):
        result = enroll(KEY, 10, [booking(1, 11)], 5, NOW, class_status=ClassStatus.FULL)

        assert result.error.kind == ErrorKind.CLASS_UNAVAILABLE

    def test_duplicate_booking(self):
        roster = [booking(1, 10)]

        result = enroll(KEY, 10, roster, 5, NOW)

        assert result.error.kind == ErrorKind.DUPLICATE_BOOKING
        assert result.error.context["booking_id"] == 1

    def test_attended_booking_also_blocks_duplicate(self):
        result = enroll(KEY, 10, [booking(1, 10, BookingStatus.ATTENDED)], 5, NOW)

        assert result.error.kind == ErrorKind.DUPLICATE_BOOKING

    def test_cancelled_booking_allows_rebooking(self):
        result = enroll(KEY, 10, [booking(1, 10, BookingStatus.CANCELLED)], 5, NOW)

        assert result.ok

    def test_unavailable_wins_over_duplicate_and_capacity(self):
        roster = [booking(1, 10), booking(2, 11)]

        result = enroll(KEY, 10, roster, 2, NOW, class_status=ClassStatus.INACTIVE)

        assert result.error.kind == ErrorKind.CLASS_UNAVAILABLE

    def test_duplicate_wins_over_capacity(self):
        roster = [booking(1, 10), booking(2, 11)]

        result = enroll(KEY, 10, roster, 2, NOW)

        assert result.error.kind == ErrorKind.DUPLICATE_BOOKING

    def test_other_occurrences_do_not_count(self):
        other_key = OccurrenceKey(class_id=1, date=date(2026, 10, 26), start_time="06:00")
        roster = [booking(1, 11, key=other_key), booking(2, 12, key=other_key)]

        result = enroll(KEY, 10, roster, 2, NOW)

        assert result.ok


def test_capacity_scenario_cancel_frees_spot():
    roster = [booking(1, 10), booking(2, 11)]

    third = enroll(KEY, 12, roster, 2, NOW)
    assert third.error.kind == ErrorKind.CAPACITY_EXCEEDED
    assert third.error.context == {"capacity": 2, "enrolled": 2}

    cancelled = cancel(1, roster, NOW)
    assert cancelled.ok
    assert cancelled.value.booking.status == BookingStatus.CANCELLED
    assert cancelled.value.activity.type == ActivityType.ENROLLMENT_CANCELLED
    roster = apply(roster, cancelled.value.booking)

    assert available_spots(roster, KEY, 2) == 1
    retry = enroll(KEY, 12, roster, 2, NOW)
    assert retry.ok


@pytest.mark.parametrize("capacity", [1, 2, 3])
def test_capacity_never_exceeded(capacity):
    roster = []
    for member_id in range(1, 8):
        result = enroll(KEY, member_id, roster, capacity, NOW)
        if result.ok:
            roster = apply(roster, result.value.booking)
        assert active_count(roster, KEY) <= capacity
        if member_id % 3 == 0 and roster:
            cancelled = cancel(roster[0].id, roster, NOW)
            if cancelled.ok:
                roster = apply(roster, cancelled.value.booking)

    assert active_count(roster, KEY) == capacity


class TestCancel:
    def test_cancel_twice_is_invalid_state(self):
        roster = [booking(1, 10)]
        first = cancel(1, roster, NOW)
        roster = apply(roster, first.value.booking)

        second = cancel(1, roster, NOW)

        assert second.error.kind == ErrorKind.INVALID_STATE

    def test_cannot_cancel_attended(self):
        result = cancel(1, [booking(1, 10, BookingStatus.ATTENDED)], NOW)

        assert result.error.kind == ErrorKind.INVALID_STATE

    def test_unknown_booking(self):
        result = cancel(99, [booking(1, 10)], NOW)

        assert result.error.kind == ErrorKind.INVALID_STATE

    def test_cancel_sets_timestamp(self):
        result = cancel(1, [booking(1, 10)], NOW)

        assert result.value.booking.cancelled_at == NOW


class TestCheckInToClass:
    def test_confirmed_booking_today(self):
        result = check_in_to_class(1, [booking(1, 10)], NOW, tz="UTC")

        assert result.ok
        assert result.value.booking.status == BookingStatus.ATTENDED
        assert result.value.booking.attended_at == NOW
        assert result.value.activity.type == ActivityType.CLASS_ATTENDED

    def test_future_occurrence_is_not_today(self):
        future_key = OccurrenceKey(class_id=1, date=date(2026, 10, 26), start_time="06:00")

        result = check_in_to_class(1, [booking(1, 10, key=future_key)], NOW, tz="UTC")

        assert result.error.kind == ErrorKind.NOT_TODAY

    def test_past_occurrence_is_not_today(self):
        past_key = OccurrenceKey(class_id=1, date=date(2026, 10, 12), start_time="06:00")

        result = check_in_to_class(1, [booking(1, 10, key=past_key)], NOW, tz="UTC")

        assert result.error.kind == ErrorKind.NOT_TODAY

    def test_today_is_taken_in_operating_timezone(self):
        # 05:00 UTC в понедельник - ещё воскресенье в Лос-Анджелесе
        result = check_in_to_class(1, [booking(1, 10)], NOW, tz="America/Los_Angeles")

        assert result.error.kind == ErrorKind.NOT_TODAY

    def test_cancelled_booking_is_invalid_state(self):
        result = check_in_to_class(1, [booking(1, 10, BookingStatus.CANCELLED)], NOW, tz="UTC")

        assert result.error.kind == ErrorKind.INVALID_STATE

    def test_attended_twice_is_invalid_state(self):
        result = check_in_to_class(1, [booking(1, 10, BookingStatus.ATTENDED)], NOW, tz="UTC")

        assert result.error.kind == ErrorKind.INVALID_STATE
