from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import ALL_ROLES, SCHEDULE_ROLES, get_current_user
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.errors.booking_errors import LookupFailure
from gym_schedule.errors.http import http_error_for, raise_for_error
from gym_schedule.models import BookingStatus, UserRole
from gym_schedule.schemas.booking import BookingCreate, BookingResponse
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.booking import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> BookingService:
    return BookingService(db, clock, activity_log)


@router.get("/", response_model=List[BookingResponse])
def list_bookings_endpoint(
    member_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    upcoming: bool = False,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: BookingService = Depends(get_booking_service),
):
    # Участник видит только свои записи
    if current_user["role"] == UserRole.MEMBER.value:
        member_id = current_user["id"]
    return service.list_bookings(member_id=member_id, status=status, upcoming=upcoming)


# Запись на занятие
@router.post("/", response_model=BookingResponse, status_code=201)
def create_booking_endpoint(
    booking_data: BookingCreate,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: BookingService = Depends(get_booking_service),
):
    """
    Записывает участника на занятие.
    Ошибки бизнес-правил возвращаются с кодом в detail.code:
    ClassUnavailable (423), DuplicateBooking (409), CapacityExceeded (422).
    """
    try:
        result = service.enroll(booking_data, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
    raise_for_error(result)
    return result.value


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking_endpoint(
    booking_id: int,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: BookingService = Depends(get_booking_service),
):
    try:
        result = service.cancel(booking_id, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
    raise_for_error(result)
    return result.value


@router.post("/{booking_id}/check-in", response_model=BookingResponse)
def check_in_booking_endpoint(
    booking_id: int,
    current_user = Depends(get_current_user(SCHEDULE_ROLES)),
    service: BookingService = Depends(get_booking_service),
):
    try:
        result = service.check_in_to_class(booking_id, current_user)
    except LookupFailure as e:
        raise http_error_for(e)
    raise_for_error(result)
    return result.value
