import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gym_schedule import crud
from gym_schedule.core.clock import Clock
from gym_schedule.core.result import ErrorKind, Result
from gym_schedule.database import transactional
from gym_schedule.errors.booking_errors import (
    AlreadyCheckedOut,
    BookingNotFound,
    CheckInNotFound,
    MemberInactive,
    MemberNotFound,
)
from gym_schedule.models import ActivityType, CheckIn, MembershipStatus
from gym_schedule.schemas.check_in import CheckInCreate
from gym_schedule.services import check_in_aggregator as aggregator
from gym_schedule.services.activity_log import ActivityLog, make_activity
from gym_schedule.services.booking import BookingService
from gym_schedule.services.snapshots import check_in_record, member_birthday

logger = logging.getLogger(__name__)

SUMMARY_WINDOW_DAYS = 7


class CheckInService:
    def __init__(self, db: Session, clock: Clock, activity_log: ActivityLog):
        self.db = db
        self.clock = clock
        self.activity_log = activity_log

    # --- Public Methods (Transactional) ---

    def record_check_in(self, check_in_data: CheckInCreate, current_user: Dict[str, Any]) -> Result[CheckIn]:
        """
        Регистрация визита на ресепшене.
        С booking_id запись на занятие сразу отмечается как посещённая.
        """
        member = crud.fetch_member(self.db, check_in_data.member_id)
        if not member:
            raise MemberNotFound(check_in_data.member_id)
        if member.status != MembershipStatus.ACTIVE:
            raise MemberInactive(member.id)

        booking = None
        class_id = check_in_data.class_id
        if check_in_data.booking_id:
            booking = crud.fetch_booking(self.db, check_in_data.booking_id)
            if not booking:
                raise BookingNotFound(check_in_data.booking_id)
            if booking.member_id != member.id:
                return Result.failure(
                    ErrorKind.INVALID_STATE,
                    "Booking belongs to another member",
                    booking_id=booking.id,
                )
            class_id = booking.class_id

        now = self.clock.now()
        published = []
        # Отметка посещения и сам визит сохраняются одной транзакцией
        with transactional(self.db) as session:
            if booking is not None:
                attended = BookingService(self.db, self.clock, self.activity_log).mark_attended(
                    session, booking, current_user
                )
                if not attended.ok:
                    return Result.from_error(attended.error)
                published.append(attended.value[1])

            check_in = crud.persist_check_in(
                session,
                member,
                now,
                class_id=class_id,
                booking_id=check_in_data.booking_id,
            )
            activity = make_activity(
                ActivityType.CHECKIN,
                f"{member.full_name} checked in",
                now,
                member_id=member.id,
                metadata={"checkInId": check_in.id, "classId": class_id},
                actor=current_user,
            )
            crud.persist_activity(session, activity)
            published.append(activity)

        for entry in published:
            self.activity_log.append(entry)
        logger.info(f"Member {member.id} checked in (check-in {check_in.id})")
        return Result.success(check_in)

    def check_out(self, check_in_id: int, current_user: Dict[str, Any]) -> CheckIn:
        check_in = crud.fetch_check_in(self.db, check_in_id)
        if not check_in:
            raise CheckInNotFound(check_in_id)
        if check_in.check_out_time is not None:
            raise AlreadyCheckedOut(check_in_id)

        now = self.clock.now()
        with transactional(self.db) as session:
            crud.persist_check_out(session, check_in, now)
            activity = make_activity(
                ActivityType.CHECKOUT,
                f"{check_in.member_name} checked out",
                now,
                member_id=check_in.member_id,
                metadata={"checkInId": check_in.id},
                actor=current_user,
            )
            crud.persist_activity(session, activity)

        self.activity_log.append(activity)
        logger.info(f"Check-in {check_in_id} closed")
        return check_in

    # --- Public Methods (Read-only) ---

    def list_check_ins(self, member_id: Optional[int] = None, limit: Optional[int] = None) -> List[CheckIn]:
        return crud.fetch_check_ins(self.db, member_id, limit=limit)

    def counts(self, member_id: Optional[int] = None) -> Dict[str, Any]:
        now = self.clock.now()
        records = [check_in_record(row) for row in crud.fetch_check_ins(self.db)]

        result = {
            "today": aggregator.today_count(records, now, self.clock.tz),
            "this_week": aggregator.weekly_count(records, now, self.clock.tz),
            "week_starts_at": aggregator.week_boundary(now, self.clock.tz),
            "member_id": member_id,
        }
        if member_id is not None:
            result["member_month_to_date"] = aggregator.month_to_date_count(records, member_id, now, self.clock.tz)
            result["member_total_visits"] = aggregator.total_visits(records, member_id)
        return result

    def summary(self) -> Dict[str, Any]:
        """Статистика за последние 7 дней: распределение по часам и пиковый час"""
        now = self.clock.now()
        start = now - timedelta(days=SUMMARY_WINDOW_DAYS)
        records = [check_in_record(row) for row in crud.fetch_check_ins(self.db)]
        return aggregator.check_in_statistics(records, self.clock.tz, start=start, end=now)

    def upcoming_birthdays(self, horizon_days: Optional[int] = None) -> List[Dict[str, Any]]:
        members = [member_birthday(member) for member in crud.fetch_members(self.db, status=MembershipStatus.ACTIVE)]
        matches = aggregator.upcoming_birthdays(members, self.clock.now(), horizon_days, self.clock.tz)
        return [
            {
                "member_id": match.member.member_id,
                "name": match.member.name,
                "birthday": match.birthday,
                "days_until": match.days_until,
            }
            for match in matches
        ]
