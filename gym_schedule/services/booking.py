import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from gym_schedule import crud
from gym_schedule.core.clock import Clock, day_of_week
from gym_schedule.core.result import ErrorKind, Result
from gym_schedule.database import transactional
from gym_schedule.errors.booking_errors import (
    ActingForAnotherMember,
    BookingNotFound,
    ClassNotFound,
    MemberInactive,
    MemberNotFound,
    NotBookingOwner,
    SlotNotFound,
)
from gym_schedule.models import Booking, BookingStatus, GymClass, MembershipStatus, UserRole
from gym_schedule.schemas.booking import BookingCreate
from gym_schedule.services import enrollment_ledger as ledger
from gym_schedule.services.activity_log import ActivityEntry, ActivityLog
from gym_schedule.services.schedule_resolver import OccurrenceKey, next_occurrence, validate_slot
from gym_schedule.services.snapshots import class_snapshot, roster

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, db: Session, clock: Clock, activity_log: ActivityLog):
        self.db = db
        self.clock = clock
        self.activity_log = activity_log

    # --- Public Methods (Transactional) ---

    def enroll(self, booking_data: BookingCreate, current_user: Dict[str, Any]) -> Result[Booking]:
        """
        Запись участника на конкретное занятие.

        Сначала ledger проверяет правила на снимке записей, затем
        persist_booking повторяет проверку мест под блокировкой.
        """
        member_id = booking_data.member_id or current_user["id"]
        self._check_member_scope(current_user, member_id)

        gym_class = crud.fetch_class(self.db, booking_data.class_id)
        if not gym_class:
            raise ClassNotFound(booking_data.class_id)

        member = crud.fetch_member(self.db, member_id)
        if not member:
            raise MemberNotFound(member_id)
        if member.status != MembershipStatus.ACTIVE:
            raise MemberInactive(member_id)

        key_result = self.resolve_occurrence(
            gym_class,
            booking_data.start_time,
            booking_date=booking_data.booking_date,
            weekday=booking_data.day_of_week,
        )
        if not key_result.ok:
            return Result.from_error(key_result.error)
        key = key_result.value

        now = self.clock.now()
        if key.date < now.date():
            return Result.failure(
                ErrorKind.INVALID_STATE,
                "Cannot book a class that already took place",
                booking_date=key.date.isoformat(),
            )

        with transactional(self.db) as session:
            current_roster = roster(crud.fetch_bookings(session, key.class_id, key.date, key.start_time))
            decision = ledger.enroll(
                key,
                member.id,
                current_roster,
                gym_class.max_capacity,
                now,
                class_status=gym_class.status,
                member_name=member.full_name,
                actor=current_user,
            )
            if not decision.ok:
                logger.info(f"Enrollment rejected for member {member.id} on {key}: {decision.error.kind.value}")
                return Result.from_error(decision.error)

            stored = crud.persist_booking(session, decision.value.booking, gym_class.max_capacity)
            if not stored.ok:
                return stored
            crud.persist_activity(session, decision.value.activity)

        self.activity_log.append(decision.value.activity)
        logger.info(f"Member {member.id} enrolled on {key} (booking {stored.value.id})")
        return stored

    def cancel(self, booking_id: int, current_user: Dict[str, Any]) -> Result[Booking]:
        booking = self._get_booking(booking_id, current_user)
        now = self.clock.now()

        with transactional(self.db) as session:
            current_roster = roster(
                crud.fetch_bookings(session, booking.class_id, booking.booking_date, booking.start_time)
            )
            decision = ledger.cancel(booking.id, current_roster, now, actor=current_user)
            if not decision.ok:
                return Result.from_error(decision.error)

            stored = crud.persist_booking_status(session, decision.value.booking, BookingStatus.CONFIRMED)
            if not stored.ok:
                return stored
            crud.persist_activity(session, decision.value.activity)

        self.activity_log.append(decision.value.activity)
        logger.info(f"Booking {booking_id} cancelled")
        return stored

    def check_in_to_class(self, booking_id: int, current_user: Dict[str, Any]) -> Result[Booking]:
        """
        Отметка посещения: только подтверждённая запись и только в день занятия
        """
        booking = self._get_booking(booking_id, current_user)

        with transactional(self.db) as session:
            attended = self.mark_attended(session, booking, current_user)
        if not attended.ok:
            return Result.from_error(attended.error)

        stored, activity = attended.value
        self.activity_log.append(activity)
        logger.info(f"Booking {booking_id} marked as attended")
        return Result.success(stored)

    def mark_attended(
        self,
        session: Session,
        booking: Booking,
        current_user: Dict[str, Any],
    ) -> Result[Tuple[Booking, ActivityEntry]]:
        """
        confirmed -> attended внутри уже открытой транзакции вызывающего.
        Событие возвращается, публиковать его в ленту нужно после коммита.
        """
        current_roster = roster(
            crud.fetch_bookings(session, booking.class_id, booking.booking_date, booking.start_time)
        )
        decision = ledger.check_in_to_class(
            booking.id, current_roster, self.clock.now(), tz=self.clock.tz, actor=current_user
        )
        if not decision.ok:
            return Result.from_error(decision.error)

        stored = crud.persist_booking_status(session, decision.value.booking, BookingStatus.CONFIRMED)
        if not stored.ok:
            return Result.from_error(stored.error)
        crud.persist_activity(session, decision.value.activity)
        return Result.success((stored.value, decision.value.activity))

    # --- Public Methods (Read-only) ---

    def resolve_occurrence(
        self,
        gym_class: GymClass,
        start_time: str,
        booking_date: Optional[date] = None,
        weekday: Optional[int] = None,
    ) -> Result[OccurrenceKey]:
        """
        Находит слот расписания и возвращает ключ занятия.
        Без явной даты берётся ближайшее занятие этого слота.
        """
        if booking_date is not None:
            weekday = day_of_week(booking_date)

        snapshot = class_snapshot(gym_class)
        slot = next(
            (s for s in snapshot.slots if s.day_of_week == weekday and s.start_time == start_time),
            None,
        )
        if slot is None:
            raise SlotNotFound(gym_class.id, weekday, start_time)

        if booking_date is not None:
            checked = validate_slot(slot)
            if not checked.ok:
                return Result.from_error(checked.error)
            return Result.success(OccurrenceKey(class_id=gym_class.id, date=booking_date, start_time=start_time))

        occurrence = next_occurrence(slot, self.clock.now(), self.clock.tz, class_id=gym_class.id)
        if not occurrence.ok:
            return Result.from_error(occurrence.error)
        return Result.success(occurrence.value.key)

    def get_roster(self, class_id: int, booking_date: date, start_time: str) -> Dict[str, Any]:
        gym_class = crud.fetch_class(self.db, class_id)
        if not gym_class:
            raise ClassNotFound(class_id)

        bookings = crud.fetch_bookings(self.db, class_id, booking_date, start_time)
        key = OccurrenceKey(class_id=class_id, date=booking_date, start_time=start_time)
        entries = roster(bookings)

        return {
            "class_id": class_id,
            "booking_date": booking_date,
            "start_time": start_time,
            "capacity": gym_class.max_capacity,
            "enrolled": ledger.active_count(entries, key),
            "available_spots": ledger.available_spots(entries, key, gym_class.max_capacity),
            "bookings": [
                {
                    "booking_id": booking.id,
                    "member_id": booking.member_id,
                    "name": booking.member.full_name,
                    "email": booking.member.email,
                    "status": booking.status,
                    "booked_at": booking.created_at,
                }
                for booking in bookings
                if booking.status != BookingStatus.CANCELLED
            ],
        }

    def list_bookings(
        self,
        member_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        upcoming: bool = False,
    ) -> List[Booking]:
        from_date = self.clock.today() if upcoming else None
        return crud.fetch_member_bookings(self.db, member_id=member_id, status=status, from_date=from_date)

    # --- Helpers ---

    def _get_booking(self, booking_id: int, current_user: Dict[str, Any]) -> Booking:
        booking = crud.fetch_booking(self.db, booking_id)
        if not booking:
            raise BookingNotFound(booking_id)
        if current_user.get("role") == UserRole.MEMBER.value and booking.member_id != current_user.get("id"):
            raise NotBookingOwner(booking_id)
        return booking

    @staticmethod
    def _check_member_scope(current_user: Dict[str, Any], member_id: int) -> None:
        # Участник может записывать только себя
        if current_user.get("role") == UserRole.MEMBER.value and member_id != current_user.get("id"):
            raise ActingForAnotherMember(member_id)
