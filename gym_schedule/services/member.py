import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gym_schedule import crud
from gym_schedule.core.clock import Clock
from gym_schedule.database import transactional
from gym_schedule.errors.booking_errors import MemberEmailTaken, MemberNotFound
from gym_schedule.models import ActivityType, Member, MembershipStatus
from gym_schedule.schemas.member import MemberCreate, MemberUpdate
from gym_schedule.services.activity_log import ActivityLog, make_activity

logger = logging.getLogger(__name__)

# Изменение этих полей считается сменой абонемента
MEMBERSHIP_FIELDS = ("membership_type", "status")


class MemberService:
    def __init__(self, db: Session, clock: Clock, activity_log: ActivityLog):
        self.db = db
        self.clock = clock
        self.activity_log = activity_log

    def list_members(self, status: Optional[MembershipStatus] = None) -> List[Member]:
        return crud.fetch_members(self.db, status=status)

    def create_member(self, member_data: MemberCreate, current_user: Dict[str, Any]) -> Member:
        if crud.fetch_member_by_email(self.db, member_data.email):
            raise MemberEmailTaken(member_data.email)

        now = self.clock.now()
        with transactional(self.db) as session:
            member = crud.create_member(session, member_data)
            activity = make_activity(
                ActivityType.MEMBER_ADDED,
                f"New member {member.full_name} added",
                now,
                member_id=member.id,
                metadata={"membershipType": member.membership_type},
                actor=current_user,
            )
            crud.persist_activity(session, activity)

        self.activity_log.append(activity)
        logger.info(f"Member {member.id} created")
        return member

    def update_member(self, member_id: int, update_data: MemberUpdate, current_user: Dict[str, Any]) -> Member:
        member = crud.fetch_member(self.db, member_id)
        if not member:
            raise MemberNotFound(member_id)

        changes = update_data.model_dump(exclude_unset=True)
        membership_changed = any(
            field in changes and changes[field] != getattr(member, field) for field in MEMBERSHIP_FIELDS
        )

        now = self.clock.now()
        with transactional(self.db) as session:
            crud.update_member(session, member, update_data)
            activity_type = ActivityType.MEMBERSHIP_CHANGED if membership_changed else ActivityType.MEMBER_UPDATED
            message = (
                f"Membership of {member.full_name} changed"
                if membership_changed
                else f"Member {member.full_name} updated"
            )
            activity = make_activity(
                activity_type,
                message,
                now,
                member_id=member.id,
                metadata={"fields": sorted(changes.keys())},
                actor=current_user,
            )
            crud.persist_activity(session, activity)

        self.activity_log.append(activity)
        logger.info(f"Member {member_id} updated ({activity_type.value})")
        return member
