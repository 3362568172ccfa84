import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from gym_schedule.models import ActivityLogEntry, ActivityType
from gym_schedule.services.activity_log import ActivityEntry

logger = logging.getLogger(__name__)


def persist_activity(db: Session, entry: ActivityEntry) -> ActivityLogEntry:
    row = ActivityLogEntry(
        id=entry.id,
        type=entry.type,
        message=entry.message,
        timestamp=entry.timestamp,
        member_id=entry.member_id,
        updated_by_user_id=entry.updated_by_user_id,
        updated_by_name=entry.updated_by_name,
        updated_by_role=entry.updated_by_role,
        details=entry.metadata or None,
    )
    db.add(row)
    db.flush()
    return row


def fetch_activities(
    db: Session,
    *,
    limit: int = 50,
    member_id: Optional[int] = None,
    activity_type: Optional[ActivityType] = None,
) -> List[ActivityLogEntry]:
    query = db.query(ActivityLogEntry)
    if member_id is not None:
        query = query.filter(ActivityLogEntry.member_id == member_id)
    if activity_type is not None:
        query = query.filter(ActivityLogEntry.type == activity_type)
    return query.order_by(ActivityLogEntry.timestamp.desc()).limit(limit).all()


def delete_old_activities(db: Session, days_old: int = 90, now: Optional[datetime] = None) -> int:
    """
    Удаляет записи журнала старше days_old дней, возвращает количество удалённых
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days_old)
    deleted = (
        db.query(ActivityLogEntry)
        .filter(ActivityLogEntry.timestamp < cutoff)
        .delete(synchronize_session=False)
    )
    logger.info(f"Deleted {deleted} activity entries older than {days_old} days")
    return deleted
