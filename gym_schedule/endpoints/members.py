from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import get_current_user
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.errors.booking_errors import LookupFailure
from gym_schedule.errors.http import http_error_for
from gym_schedule.models import MembershipStatus
from gym_schedule.models.member import STAFF_ROLES
from gym_schedule.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.member import MemberService

router = APIRouter(prefix="/members", tags=["Members"])


def get_member_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> MemberService:
    return MemberService(db, clock, activity_log)


@router.get("/", response_model=List[MemberResponse])
def list_members_endpoint(
    status: Optional[MembershipStatus] = None,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    return service.list_members(status=status)


@router.post("/", response_model=MemberResponse, status_code=201)
def create_member_endpoint(
    member_data: MemberCreate,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    try:
        return service.create_member(member_data, current_user)
    except LookupFailure as e:
        raise http_error_for(e)


@router.put("/{member_id}", response_model=MemberResponse)
def update_member_endpoint(
    member_id: int,
    update_data: MemberUpdate,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    try:
        return service.update_member(member_id, update_data, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
