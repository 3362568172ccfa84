from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gym_schedule.models.member import MembershipStatus, UserRole


class MemberCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    membership_type: Optional[str] = None
    status: MembershipStatus = MembershipStatus.ACTIVE
    role: UserRole = UserRole.MEMBER


class MemberUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    membership_type: Optional[str] = None
    status: Optional[MembershipStatus] = None
    role: Optional[UserRole] = None


class MemberResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    membership_type: Optional[str] = None
    status: MembershipStatus
    role: UserRole
    last_check_in: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BirthdayResponse(BaseModel):
    member_id: int
    name: str
    birthday: date
    days_until: int
