from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gym_schedule.models.gym_class import ClassCategory, ClassStatus, Difficulty
from gym_schedule.services.schedule_resolver import normalize_time_of_day, parse_day_of_week


# Слот еженедельного расписания
class ScheduleSlotCreate(BaseModel):
    day_of_week: int = Field(
        ...,
        title="День недели",
        description="Номер дня недели (0-6, где 0 - воскресенье) или его название",
        ge=0,
        le=6,
    )
    start_time: str = Field(..., title="Время начала", description="HH:MM, 24h", examples=["06:00"])
    end_time: str = Field(..., title="Время окончания", description="HH:MM, 24h", examples=["07:00"])

    @field_validator("day_of_week", mode="before")
    def parse_day(cls, v: Union[int, str]) -> int:
        return parse_day_of_week(v)

    @field_validator("start_time", "end_time")
    def validate_time(cls, v: str) -> str:
        normalized = normalize_time_of_day(v)
        if normalized is None:
            raise ValueError("Время должно быть в формате HH:MM (например, 06:00)")
        return normalized

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_time >= self.end_time:
            raise ValueError("Время начала должно быть раньше времени окончания")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"day_of_week": 1, "start_time": "06:00", "end_time": "07:00"}
            ]
        }
    )


class ScheduleSlotResponse(BaseModel):
    id: int
    day_of_week: int
    start_time: str
    end_time: str

    model_config = ConfigDict(from_attributes=True)


class GymClassCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration_minutes: int = Field(60, gt=0)
    max_capacity: int = Field(20, gt=0)
    difficulty: Difficulty = Difficulty.BEGINNER
    category: ClassCategory = ClassCategory.MIXED
    price: float = Field(0, ge=0)
    status: ClassStatus = ClassStatus.ACTIVE
    schedule_slots: List[ScheduleSlotCreate] = []


class GymClassUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    max_capacity: Optional[int] = Field(None, gt=0)
    difficulty: Optional[Difficulty] = None
    category: Optional[ClassCategory] = None
    price: Optional[float] = Field(None, ge=0)
    status: Optional[ClassStatus] = None
    schedule_slots: Optional[List[ScheduleSlotCreate]] = None


class GymClassResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    duration_minutes: int
    max_capacity: int
    difficulty: Difficulty
    category: ClassCategory
    price: float
    status: ClassStatus
    schedule_slots: List[ScheduleSlotResponse]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
