from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import SCHEDULE_ROLES, get_current_user
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.models.member import STAFF_ROLES
from gym_schedule.schemas.check_in import CheckInCountsResponse, CheckInSummaryResponse
from gym_schedule.schemas.member import BirthdayResponse
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.check_in import CheckInService

router = APIRouter(prefix="/stats", tags=["Stats"])


def get_check_in_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> CheckInService:
    return CheckInService(db, clock, activity_log)


# Посещаемость: сегодня, текущая неделя, месяц участника
@router.get("/check-ins", response_model=CheckInCountsResponse)
def check_in_counts_endpoint(
    member_id: Optional[int] = None,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    """
    Неделя начинается в понедельник в 02:00 по местному времени,
    поздние воскресные визиты относятся к уходящей неделе.
    """
    return service.counts(member_id=member_id)


@router.get("/check-ins/summary", response_model=CheckInSummaryResponse)
def check_in_summary_endpoint(
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    return service.summary()


@router.get("/birthdays", response_model=List[BirthdayResponse])
def upcoming_birthdays_endpoint(
    horizon_days: Optional[int] = Query(None, ge=0, le=366),
    current_user = Depends(get_current_user(SCHEDULE_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    return service.upcoming_birthdays(horizon_days)
