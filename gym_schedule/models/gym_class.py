from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from gym_schedule.database import Base


def enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class ClassCategory(str, Enum):
    CARDIO = "Cardio"
    STRENGTH = "Strength"
    FLEXIBILITY = "Flexibility"
    MIXED = "Mixed"
    SPECIALIZED = "Specialized"


class ClassStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    # Подсказка для UI, реальная заполненность считается по записям
    FULL = "full"


class GymClass(Base):
    __tablename__ = "gym_classes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    max_capacity = Column(Integer, nullable=False, default=20)
    difficulty = Column(
        SQLEnum(Difficulty, values_callable=enum_values, name="classdifficulty"),
        nullable=False,
        default=Difficulty.BEGINNER,
    )
    category = Column(
        SQLEnum(ClassCategory, values_callable=enum_values, name="classcategory"),
        nullable=False,
        default=ClassCategory.MIXED,
    )
    price = Column(Float, nullable=False, default=0)
    status = Column(
        SQLEnum(ClassStatus, values_callable=enum_values, name="classstatus"),
        nullable=False,
        default=ClassStatus.ACTIVE,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    schedule_slots = relationship(
        "ScheduleSlot",
        back_populates="gym_class",
        cascade="all, delete-orphan",
        order_by="ScheduleSlot.day_of_week",
    )
    bookings = relationship("Booking", back_populates="gym_class", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="check_class_duration_positive"),
        CheckConstraint("max_capacity > 0", name="check_class_capacity_positive"),
        CheckConstraint("price >= 0", name="check_class_price_non_negative"),
    )

    def __repr__(self):
        return f"<GymClass(id={self.id}, name={self.name}, status={self.status})>"


class ScheduleSlot(Base):
    __tablename__ = "schedule_slots"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("gym_classes.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = воскресенье
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)

    gym_class = relationship("GymClass", back_populates="schedule_slots")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="check_slot_day_of_week"),
        CheckConstraint("start_time < end_time", name="check_slot_start_before_end"),
        Index("idx_slot_day_time", "day_of_week", "start_time"),
    )
