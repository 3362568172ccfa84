from enum import Enum

from sqlalchemy import JSON, Column, DateTime, Enum as SQLEnum, Integer, String

from gym_schedule.database import Base
from gym_schedule.models.gym_class import enum_values


class ActivityType(str, Enum):
    CHECKIN = "checkin"
    CHECKOUT = "checkout"
    ENROLLMENT = "enrollment"
    ENROLLMENT_CANCELLED = "enrollment_cancelled"
    CLASS_ATTENDED = "class_attended"
    MEMBER_ADDED = "member_added"
    MEMBER_UPDATED = "member_updated"
    MEMBERSHIP_CHANGED = "membership_changed"
    CLASS_CREATED = "class_created"
    CLASS_UPDATED = "class_updated"
    CLASS_DELETED = "class_deleted"
    SCHEDULE_CREATED = "schedule_created"
    SCHEDULE_UPDATED = "schedule_updated"
    SCHEDULE_DELETED = "schedule_deleted"
    BIRTHDAY_UPCOMING = "birthday_upcoming"


class ActivityLogEntry(Base):
    __tablename__ = "activity_log"

    id = Column(String, primary_key=True)
    type = Column(SQLEnum(ActivityType, values_callable=enum_values, name="activitytype"), nullable=False, index=True)
    message = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    member_id = Column(Integer, nullable=True, index=True)
    updated_by_user_id = Column(Integer, nullable=True)
    updated_by_name = Column(String, nullable=True)
    updated_by_role = Column(String, nullable=True)
    # "metadata" занято у declarative Base
    details = Column("metadata", JSON, nullable=True)
