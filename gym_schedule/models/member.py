from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Date, DateTime, Enum as SQLEnum, Integer, String

from gym_schedule.database import Base
from gym_schedule.models.gym_class import enum_values


class UserRole(str, Enum):
    ADMIN = "admin"
    RECEPTION = "reception"
    SPARTA = "sparta"
    INSTRUCTOR = "instructor"
    MEMBER = "member"


STAFF_ROLES = [UserRole.ADMIN.value, UserRole.RECEPTION.value, UserRole.SPARTA.value]


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    membership_type = Column(String, nullable=True)
    status = Column(
        SQLEnum(MembershipStatus, values_callable=enum_values, name="membershipstatus"),
        nullable=False,
        default=MembershipStatus.ACTIVE,
    )
    role = Column(
        SQLEnum(UserRole, values_callable=enum_values, name="userrole"),
        nullable=False,
        default=UserRole.MEMBER,
    )
    last_check_in = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Member(id={self.id}, first_name={self.first_name}, last_name={self.last_name})>"
