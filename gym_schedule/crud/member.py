from typing import List, Optional

from sqlalchemy.orm import Session

from gym_schedule.models import Member, MembershipStatus
from gym_schedule.schemas.member import MemberCreate, MemberUpdate


def fetch_members(db: Session, *, status: Optional[MembershipStatus] = None) -> List[Member]:
    query = db.query(Member)
    if status:
        query = query.filter(Member.status == status)
    return query.order_by(Member.last_name, Member.first_name, Member.id).all()


def fetch_member(db: Session, member_id: int) -> Optional[Member]:
    return db.query(Member).filter(Member.id == member_id).first()


def fetch_member_by_email(db: Session, email: str) -> Optional[Member]:
    return db.query(Member).filter(Member.email == email).first()


def create_member(db: Session, member_data: MemberCreate) -> Member:
    member = Member(**member_data.model_dump())
    db.add(member)
    db.flush()
    return member


def update_member(db: Session, member: Member, update_data: MemberUpdate) -> Member:
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(member, field, value)
    db.flush()
    return member
