from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckInCreate(BaseModel):
    member_id: int = Field(..., gt=0)
    class_id: Optional[int] = Field(None, gt=0)
    booking_id: Optional[int] = Field(None, gt=0)


class CheckInResponse(BaseModel):
    id: int
    member_id: Optional[int]
    member_name: str
    membership_type: Optional[str] = None
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    class_id: Optional[int] = None
    booking_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class CheckInCountsResponse(BaseModel):
    today: int
    this_week: int
    week_starts_at: datetime
    member_id: Optional[int] = None
    member_month_to_date: Optional[int] = None
    member_total_visits: Optional[int] = None


class CheckInSummaryResponse(BaseModel):
    total_check_ins: int
    unique_members: int
    peak_hour: int
    peak_hour_count: int
    average_per_day: float
    hourly_distribution: Dict[int, int]
