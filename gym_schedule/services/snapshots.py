"""Conversions from ORM rows to the plain values the engine works on."""
from typing import Iterable, List

from gym_schedule.models import ActivityLogEntry, Booking, BookingStatus, CheckIn, GymClass, Member
from gym_schedule.services.activity_log import ActivityEntry
from gym_schedule.services.check_in_aggregator import CheckInRecord, MemberBirthday
from gym_schedule.services.enrollment_ledger import RosterEntry
from gym_schedule.services.schedule_resolver import ClassSnapshot, SlotRule


def class_snapshot(gym_class: GymClass) -> ClassSnapshot:
    return ClassSnapshot(
        id=gym_class.id,
        name=gym_class.name,
        status=gym_class.status,
        max_capacity=gym_class.max_capacity,
        slots=tuple(
            SlotRule(
                day_of_week=slot.day_of_week,
                start_time=slot.start_time,
                end_time=slot.end_time,
                slot_id=slot.id,
            )
            for slot in gym_class.schedule_slots
        ),
    )


def roster_entry(booking: Booking) -> RosterEntry:
    return RosterEntry(
        id=booking.id,
        class_id=booking.class_id,
        member_id=booking.member_id,
        booking_date=booking.booking_date,
        start_time=booking.start_time,
        status=BookingStatus(booking.status),
        created_at=booking.created_at,
        cancelled_at=booking.cancelled_at,
        attended_at=booking.attended_at,
    )


def roster(bookings: Iterable[Booking]) -> List[RosterEntry]:
    return [roster_entry(booking) for booking in bookings]


def check_in_record(check_in: CheckIn) -> CheckInRecord:
    return CheckInRecord(
        id=check_in.id,
        member_id=check_in.member_id,
        timestamp=check_in.check_in_time,
        member_name=check_in.member_name,
        membership_type=check_in.membership_type,
        check_out_time=check_in.check_out_time,
        class_id=check_in.class_id,
    )


def member_birthday(member: Member) -> MemberBirthday:
    return MemberBirthday(member_id=member.id, name=member.full_name, date_of_birth=member.date_of_birth)


def activity_entry(row: ActivityLogEntry) -> ActivityEntry:
    return ActivityEntry(
        id=row.id,
        type=row.type,
        message=row.message,
        timestamp=row.timestamp,
        member_id=row.member_id,
        metadata=row.details or {},
        updated_by_user_id=row.updated_by_user_id,
        updated_by_name=row.updated_by_name,
        updated_by_role=row.updated_by_role,
    )
