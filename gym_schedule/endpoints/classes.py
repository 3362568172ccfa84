from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from gym_schedule.auth.permissions import ALL_ROLES, SCHEDULE_ROLES, get_current_user
from gym_schedule.core.clock import Clock
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.errors.booking_errors import LookupFailure
from gym_schedule.errors.http import http_error_for, raise_for_error
from gym_schedule.models import ClassStatus
from gym_schedule.models.member import STAFF_ROLES
from gym_schedule.schemas.booking import RosterResponse
from gym_schedule.schemas.gym_class import GymClassCreate, GymClassResponse, GymClassUpdate
from gym_schedule.schemas.schedule import NextOccurrenceResponse, UpcomingClassesResponse, WeeklySlotResponse
from gym_schedule.services.activity_log import ActivityLog
from gym_schedule.services.booking import BookingService
from gym_schedule.services.gym_class import GymClassService
from gym_schedule.services.schedule_resolver import normalize_time_of_day

router = APIRouter(prefix="/classes", tags=["Classes"])


def get_class_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> GymClassService:
    return GymClassService(db, clock, activity_log)


# Получение списка занятий
@router.get("/", response_model=List[GymClassResponse])
def list_classes_endpoint(
    status: Optional[ClassStatus] = None,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    return service.list_classes(status=status)


@router.post("/", response_model=GymClassResponse, status_code=201)
def create_class_endpoint(
    class_data: GymClassCreate,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    return service.create_class(class_data, current_user)


# Ближайшие занятия по всем активным классам
@router.get("/upcoming", response_model=UpcomingClassesResponse)
def upcoming_classes_endpoint(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    """
    Ближайшее занятие каждого активного класса, по дате и времени.
    Классы с ошибками в расписании не попадают в список и возвращаются в errors.
    """
    return service.upcoming(limit=limit)


@router.get("/weekly-schedule", response_model=Dict[str, List[WeeklySlotResponse]])
def weekly_schedule_endpoint(
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    return service.weekly_schedule()


@router.get("/{class_id}", response_model=GymClassResponse)
def get_class_endpoint(
    class_id: int,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    try:
        return service.get_class(class_id)
    except LookupFailure as e:
        raise http_error_for(e)


@router.put("/{class_id}", response_model=GymClassResponse)
def update_class_endpoint(
    class_id: int,
    update_data: GymClassUpdate,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    try:
        return service.update_class(class_id, update_data, current_user)
    except LookupFailure as e:
        raise http_error_for(e)


@router.delete("/{class_id}", status_code=204)
def delete_class_endpoint(
    class_id: int,
    current_user = Depends(get_current_user(STAFF_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    try:
        service.delete_class(class_id, current_user)
    except LookupFailure as e:
        raise http_error_for(e)


@router.get("/{class_id}/next-occurrence", response_model=NextOccurrenceResponse)
def next_occurrence_endpoint(
    class_id: int,
    current_user = Depends(get_current_user(ALL_ROLES)),
    service: GymClassService = Depends(get_class_service),
):
    try:
        result = service.next_occurrence(class_id)
    except LookupFailure as e:
        raise http_error_for(e)
    raise_for_error(result)
    return {"class_id": class_id, "occurrence": result.value}


# Список записавшихся на конкретное занятие
@router.get("/{class_id}/roster", response_model=RosterResponse)
def class_roster_endpoint(
    class_id: int,
    booking_date: date = Query(..., alias="date"),
    start_time: str = Query(..., examples=["06:00"]),
    current_user = Depends(get_current_user(SCHEDULE_ROLES)),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    activity_log: ActivityLog = Depends(get_activity_log),
):
    normalized = normalize_time_of_day(start_time)
    if normalized is None:
        raise HTTPException(status_code=422, detail=f"start_time must be HH:MM, got {start_time!r}")
    try:
        return BookingService(db, clock, activity_log).get_roster(class_id, booking_date, normalized)
    except LookupFailure as e:
        raise http_error_for(e)
