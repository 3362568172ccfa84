from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import get_current_user
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.errors.booking_errors import LookupFailure
from gym_schedule.errors.http import http_error_for, raise_for_error
from gym_schedule.models.member import STAFF_ROLES
from gym_schedule.schemas.check_in import CheckInCreate, CheckInResponse
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.check_in import CheckInService

router = APIRouter(prefix="/check-ins", tags=["Check-ins"])


def get_check_in_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> CheckInService:
    return CheckInService(db, clock, activity_log)


@router.get("/", response_model=List[CheckInResponse])
def list_check_ins_endpoint(
    member_id: Optional[int] = None,
    limit: Optional[int] = Query(100, ge=1, le=1000),
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    return service.list_check_ins(member_id=member_id, limit=limit)


# Отметка прихода в зал
@router.post("/", response_model=CheckInResponse, status_code=201)
def create_check_in_endpoint(
    check_in_data: CheckInCreate,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    try:
        result = service.record_check_in(check_in_data, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
    raise_for_error(result)
    return result.value


@router.post("/{check_in_id}/check-out", response_model=CheckInResponse)
def check_out_endpoint(
    check_in_id: int,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: CheckInService = Depends(get_check_in_service),
):
    try:
        return service.check_out(check_in_id, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
