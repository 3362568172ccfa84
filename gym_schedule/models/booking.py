from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Date, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from gym_schedule.database import Base
from gym_schedule.models.gym_class import enum_values


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


# Записи, которые занимают место на занятии
OCCUPYING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.ATTENDED)


class Booking(Base):
    __tablename__ = "class_bookings"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("gym_classes.id", ondelete="CASCADE"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    status = Column(
        SQLEnum(BookingStatus, values_callable=enum_values, name="bookingstatus"),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    attended_at = Column(DateTime(timezone=True), nullable=True)

    gym_class = relationship("GymClass", back_populates="bookings")
    member = relationship("Member", backref="bookings")

    __table_args__ = (
        Index("idx_booking_occurrence", "class_id", "booking_date", "start_time"),
        # Одна активная запись участника на конкретное занятие
        Index(
            "uq_active_booking_per_member",
            "class_id",
            "booking_date",
            "start_time",
            "member_id",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, class={self.class_id}, member={self.member_id}, status={self.status})>"
