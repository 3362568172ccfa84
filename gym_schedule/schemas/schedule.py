from datetime import date as Date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class OccurrenceResponse(BaseModel):
    class_id: int
    class_name: str
    day_of_week: int
    date: Date
    start_time: str
    end_time: str
    capacity: int
    enrolled: int
    available_spots: int


class ScheduleErrorResponse(BaseModel):
    code: str
    message: str
    context: Dict[str, Any] = {}


class UpcomingClassesResponse(BaseModel):
    occurrences: List[OccurrenceResponse]
    errors: List[ScheduleErrorResponse] = []


class WeeklySlotResponse(BaseModel):
    class_id: int
    class_name: str
    day_of_week: int
    start_time: str
    end_time: str
    next_date: Date
    capacity: int
    enrolled: int


class NextOccurrenceResponse(BaseModel):
    class_id: int
    occurrence: Optional[OccurrenceResponse] = None
