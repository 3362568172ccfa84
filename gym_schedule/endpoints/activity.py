from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import get_current_user
from gym_schedule.crud.activity import delete_old_activities, fetch_activities
from gym_schedule.database import transactional
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.models import ActivityType, UserRole
from gym_schedule.models.member import STAFF_ROLES
from gym_schedule.schemas.activity import ActivityResponse
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.snapshots import activity_entry

router = APIRouter(prefix="/activity", tags=["Activity"])


# Последние события из памяти процесса
@router.get("/", response_model=List[ActivityResponse])
def recent_activity_endpoint(
    limit: Optional[int] = Query(50, ge=1),
    member_id: Optional[int] = None,
    type: Optional[ActivityType] = None,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    activity_log: ActivityLog = Depends(get_activity_log),
):
    return activity_log.entries(limit=limit, member_id=member_id, activity_type=type)


# Полная история из базы
@router.get("/history", response_model=List[ActivityResponse])
def activity_history_endpoint(
    limit: int = Query(100, ge=1, le=1000),
    member_id: Optional[int] = None,
    type: Optional[ActivityType] = None,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    db: Session = Depends(get_db),
):
    rows = fetch_activities(db, limit=limit, member_id=member_id, activity_type=type)
    return [activity_entry(row) for row in rows]


@router.delete("/history")
def prune_activity_history_endpoint(
    days_old: int = Query(90, ge=1),
    current_user = Depends(get_current_user([UserRole.ADMIN.value])),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    with transactional(db) as session:
        deleted = delete_old_activities(session, days_old=days_old, now=clock.now())
    return {"deleted": deleted}
