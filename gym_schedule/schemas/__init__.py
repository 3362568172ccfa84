from .gym_class import ScheduleSlotCreate, ScheduleSlotResponse, GymClassCreate, GymClassUpdate, GymClassResponse
from .schedule import OccurrenceResponse, ScheduleErrorResponse, UpcomingClassesResponse, WeeklySlotResponse, NextOccurrenceResponse
from .booking import BookingCreate, BookingResponse, RosterMemberResponse, RosterResponse
from .check_in import CheckInCreate, CheckInResponse, CheckInCountsResponse, CheckInSummaryResponse
from .member import MemberCreate, MemberUpdate, MemberResponse, BirthdayResponse
from .activity import ActivityResponse
