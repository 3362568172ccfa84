"""
Enroll / cancel / attend rules for one class occurrence.

Capacity is never stored: it is always recomputed from the roster passed in,
so there is no counter that can drift from the actual bookings. The result
is a pre-check only; storage re-checks it inside the inserting transaction.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

from gym_schedule.core.clock import TimezoneLike, to_local
from gym_schedule.core.result import ErrorKind, Result
from gym_schedule.models.activity import ActivityType
from gym_schedule.models.booking import OCCUPYING_STATUSES, BookingStatus
from gym_schedule.models.gym_class import ClassStatus
from gym_schedule.services.activity_log import ActivityEntry, make_activity
from gym_schedule.services.schedule_resolver import OccurrenceKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterEntry:
    id: Optional[Any]
    class_id: Any
    member_id: Any
    booking_date: date
    start_time: str
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    attended_at: Optional[datetime] = None

    @property
    def key(self) -> OccurrenceKey:
        return OccurrenceKey(class_id=self.class_id, date=self.booking_date, start_time=self.start_time)

    @property
    def occupies_spot(self) -> bool:
        return self.status in OCCUPYING_STATUSES


@dataclass(frozen=True)
class LedgerOutcome:
    booking: RosterEntry
    activity: ActivityEntry


def active_count(roster: Iterable[RosterEntry], key: OccurrenceKey) -> int:
    return sum(1 for entry in roster if entry.key == key and entry.occupies_spot)


def available_spots(roster: Iterable[RosterEntry], key: OccurrenceKey, class_capacity: int) -> int:
    return max(class_capacity - active_count(roster, key), 0)


def find_booking(roster: Iterable[RosterEntry], booking_id: Any) -> Optional[RosterEntry]:
    for entry in roster:
        if entry.id == booking_id:
            return entry
    return None


def enroll(
    key: OccurrenceKey,
    member_id: Any,
    roster: Iterable[RosterEntry],
    class_capacity: int,
    now: datetime,
    class_status: str = ClassStatus.ACTIVE,
    member_name: Optional[str] = None,
    actor: Optional[Dict[str, Any]] = None,
) -> Result[LedgerOutcome]:
    """
    First failing check wins: class availability, duplicate booking, capacity.
    """
    roster = list(roster)

    # "full" и "inactive" одинаково закрывают запись, места считаются только по записям
    if class_status != ClassStatus.ACTIVE:
        return Result.failure(
            ErrorKind.CLASS_UNAVAILABLE,
            "This class is not available for booking",
            class_id=key.class_id,
        )

    for entry in roster:
        if entry.member_id == member_id and entry.key == key and entry.status != BookingStatus.CANCELLED:
            return Result.failure(
                ErrorKind.DUPLICATE_BOOKING,
                "Member is already booked for this class",
                booking_id=entry.id,
            )

    enrolled = active_count(roster, key)
    if enrolled >= class_capacity:
        return Result.failure(
            ErrorKind.CAPACITY_EXCEEDED,
            "This class is full",
            capacity=class_capacity,
            enrolled=enrolled,
        )

    booking = RosterEntry(
        id=None,
        class_id=key.class_id,
        member_id=member_id,
        booking_date=key.date,
        start_time=key.start_time,
        status=BookingStatus.CONFIRMED,
        created_at=now,
    )
    who = member_name or f"Member {member_id}"
    activity = make_activity(
        ActivityType.ENROLLMENT,
        f"{who} enrolled for {key.date.isoformat()} {key.start_time}",
        now,
        member_id=member_id,
        metadata={"classId": key.class_id, "occurrenceKey": str(key)},
        actor=actor,
    )
    return Result.success(LedgerOutcome(booking=booking, activity=activity))


def cancel(
    booking_id: Any,
    roster: Iterable[RosterEntry],
    now: datetime,
    actor: Optional[Dict[str, Any]] = None,
) -> Result[LedgerOutcome]:
    booking = find_booking(roster, booking_id)
    if booking is None:
        return Result.failure(ErrorKind.INVALID_STATE, "Booking not found in roster", booking_id=booking_id)
    if booking.status != BookingStatus.CONFIRMED:
        return Result.failure(
            ErrorKind.INVALID_STATE,
            f"Cannot cancel a booking with status {booking.status.value}",
            booking_id=booking_id,
            status=booking.status.value,
        )

    cancelled = replace(booking, status=BookingStatus.CANCELLED, cancelled_at=now)
    activity = make_activity(
        ActivityType.ENROLLMENT_CANCELLED,
        f"Booking {booking_id} cancelled for {booking.booking_date.isoformat()} {booking.start_time}",
        now,
        member_id=booking.member_id,
        metadata={"classId": booking.class_id, "occurrenceKey": str(booking.key), "bookingId": booking_id},
        actor=actor,
    )
    return Result.success(LedgerOutcome(booking=cancelled, activity=activity))


def check_in_to_class(
    booking_id: Any,
    roster: Iterable[RosterEntry],
    now: datetime,
    tz: TimezoneLike = None,
    actor: Optional[Dict[str, Any]] = None,
) -> Result[LedgerOutcome]:
    booking = find_booking(roster, booking_id)
    if booking is None:
        return Result.failure(ErrorKind.INVALID_STATE, "Booking not found in roster", booking_id=booking_id)
    if booking.status != BookingStatus.CONFIRMED:
        return Result.failure(
            ErrorKind.INVALID_STATE,
            f"Cannot check in a booking with status {booking.status.value}",
            booking_id=booking_id,
            status=booking.status.value,
        )

    today = to_local(now, tz).date()
    if booking.booking_date != today:
        return Result.failure(
            ErrorKind.NOT_TODAY,
            "Check-in is only possible on the day of the class",
            booking_date=booking.booking_date.isoformat(),
            today=today.isoformat(),
        )

    attended = replace(booking, status=BookingStatus.ATTENDED, attended_at=now)
    activity = make_activity(
        ActivityType.CLASS_ATTENDED,
        f"Booking {booking_id} checked in for {booking.start_time}",
        now,
        member_id=booking.member_id,
        metadata={"classId": booking.class_id, "occurrenceKey": str(booking.key), "bookingId": booking_id},
        actor=actor,
    )
    return Result.success(LedgerOutcome(booking=attended, activity=activity))
