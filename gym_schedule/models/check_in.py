from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from gym_schedule.database import Base


class CheckIn(Base):
    """Point-in-time visit record; only check_out_time may change later."""

    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True, index=True)
    member_name = Column(String, nullable=False)
    membership_type = Column(String, nullable=True)
    check_in_time = Column(DateTime(timezone=True), nullable=False, index=True)
    check_out_time = Column(DateTime(timezone=True), nullable=True)
    class_id = Column(Integer, ForeignKey("gym_classes.id", ondelete="SET NULL"), nullable=True)
    booking_id = Column(Integer, ForeignKey("class_bookings.id", ondelete="SET NULL"), nullable=True)

    member = relationship("Member", backref="check_ins")
