from .gym_class import ClassCategory, ClassStatus, Difficulty, GymClass, ScheduleSlot
from .member import MembershipStatus, UserRole, Member
from .booking import BookingStatus, OCCUPYING_STATUSES, Booking
from .check_in import CheckIn
from .activity import ActivityType, ActivityLogEntry
