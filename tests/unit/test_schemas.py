import pytest
from pydantic import ValidationError

from gym_schedule.schemas.booking import BookingCreate
from gym_schedule.schemas.gym_class import ScheduleSlotCreate


class TestScheduleSlotCreate:
    def test_day_name_is_parsed(self):
        slot = ScheduleSlotCreate(day_of_week="Wednesday", start_time="6:00", end_time="07:30")

        assert slot.day_of_week == 3
        assert slot.start_time == "06:00"

    def test_unknown_day_name_falls_back_to_monday(self):
        slot = ScheduleSlotCreate(day_of_week="someday", start_time="06:00", end_time="07:00")

        assert slot.day_of_week == 1

    def test_day_out_of_range_is_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleSlotCreate(day_of_week=7, start_time="06:00", end_time="07:00")

    def test_start_must_be_before_end(self):
        with pytest.raises(ValidationError) as exc_info:
            ScheduleSlotCreate(day_of_week=1, start_time="08:00", end_time="07:00")

        assert "раньше" in str(exc_info.value)

    def test_invalid_time_format(self):
        with pytest.raises(ValidationError):
            ScheduleSlotCreate(day_of_week=1, start_time="25:00", end_time="26:00")


class TestBookingCreate:
    def test_requires_date_or_day(self):
        with pytest.raises(ValidationError):
            BookingCreate(class_id=1, start_time="06:00")

    def test_day_name_accepted(self):
        booking = BookingCreate(class_id=1, day_of_week="mon", start_time="6:00")

        assert booking.day_of_week == 1
        assert booking.start_time == "06:00"
