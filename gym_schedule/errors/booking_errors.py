# gym_schedule/errors/booking_errors.py

class LookupFailure(Exception):
    """Base exception for entities that could not be found or used."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClassNotFound(LookupFailure):
    def __init__(self, class_id: int):
        super().__init__(f"Class {class_id} not found")


class SlotNotFound(LookupFailure):
    """Raised when a class has no schedule slot for the requested day and time."""

    def __init__(self, class_id: int, day_of_week: int, start_time: str):
        super().__init__(f"Class {class_id} has no schedule slot on day {day_of_week} at {start_time}")


class MemberNotFound(LookupFailure):
    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} not found")


class MemberInactive(LookupFailure):
    """Raised when a member without an active membership tries to check in or book."""

    def __init__(self, member_id: int):
        super().__init__(f"Membership of member {member_id} is not active")


class BookingNotFound(LookupFailure):
    def __init__(self, booking_id: int):
        super().__init__(f"Booking {booking_id} not found")


class CheckInNotFound(LookupFailure):
    def __init__(self, check_in_id: int):
        super().__init__(f"Check-in {check_in_id} not found")


class AlreadyCheckedOut(LookupFailure):
    def __init__(self, check_in_id: int):
        super().__init__(f"Check-in {check_in_id} is already checked out")


class NotBookingOwner(LookupFailure):
    """Raised when a member tries to act on someone else's booking."""

    def __init__(self, booking_id: int):
        super().__init__(f"Booking {booking_id} belongs to another member")


class MemberEmailTaken(LookupFailure):
    def __init__(self, email: str):
        super().__init__(f"Member with email {email} already exists")


class ActingForAnotherMember(LookupFailure):
    def __init__(self, member_id: int):
        super().__init__(f"Members can only manage their own bookings (requested member {member_id})")
