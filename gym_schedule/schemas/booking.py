from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gym_schedule.models.booking import BookingStatus
from gym_schedule.services.schedule_resolver import normalize_time_of_day, parse_day_of_week


class BookingCreate(BaseModel):
    """
    Запись на занятие. Конкретная дата либо передаётся явно,
    либо вычисляется как ближайшее занятие по day_of_week + start_time.
    """
    class_id: int = Field(..., gt=0)
    start_time: str
    booking_date: Optional[date] = None
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    member_id: Optional[int] = Field(None, gt=0)

    @field_validator("day_of_week", mode="before")
    def parse_day(cls, v: Union[int, str, None]) -> Optional[int]:
        if v is None:
            return None
        return parse_day_of_week(v)

    @field_validator("start_time")
    def validate_start_time(cls, v: str) -> str:
        normalized = normalize_time_of_day(v)
        if normalized is None:
            raise ValueError("Время должно быть в формате HH:MM (например, 06:00)")
        return normalized

    @model_validator(mode="after")
    def validate_occurrence(self):
        if self.booking_date is None and self.day_of_week is None:
            raise ValueError("Нужно указать booking_date или day_of_week")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"class_id": 1, "booking_date": "2026-10-19", "start_time": "06:00"},
                {"class_id": 1, "day_of_week": "monday", "start_time": "06:00"},
            ]
        }
    )


class BookingResponse(BaseModel):
    id: int
    class_id: int
    member_id: int
    booking_date: date
    start_time: str
    status: BookingStatus
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    attended_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RosterMemberResponse(BaseModel):
    booking_id: int
    member_id: int
    name: str
    email: str
    status: BookingStatus
    booked_at: Optional[datetime] = None


class RosterResponse(BaseModel):
    class_id: int
    booking_date: date
    start_time: str
    capacity: int
    enrolled: int
    available_spots: int
    bookings: List[RosterMemberResponse]
