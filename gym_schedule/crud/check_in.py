import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from gym_schedule.models import CheckIn, Member

logger = logging.getLogger(__name__)


def fetch_check_ins(
    db: Session,
    member_id: Optional[int] = None,
    *,
    since: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> List[CheckIn]:
    query = db.query(CheckIn)
    if member_id is not None:
        query = query.filter(CheckIn.member_id == member_id)
    if since is not None:
        query = query.filter(CheckIn.check_in_time >= since)
    query = query.order_by(CheckIn.check_in_time.desc(), CheckIn.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def fetch_check_in(db: Session, check_in_id: int) -> Optional[CheckIn]:
    return db.query(CheckIn).filter(CheckIn.id == check_in_id).first()


def persist_check_in(
    db: Session,
    member: Member,
    check_in_time: datetime,
    class_id: Optional[int] = None,
    booking_id: Optional[int] = None,
) -> CheckIn:
    # Имя и абонемент копируются: запись визита не должна меняться вместе с профилем
    check_in = CheckIn(
        member_id=member.id,
        member_name=member.full_name,
        membership_type=member.membership_type,
        check_in_time=check_in_time,
        class_id=class_id,
        booking_id=booking_id,
    )
    member.last_check_in = check_in_time
    db.add(check_in)
    db.flush()
    return check_in


def persist_check_out(db: Session, check_in: CheckIn, check_out_time: datetime) -> CheckIn:
    check_in.check_out_time = check_out_time
    db.flush()
    return check_in
