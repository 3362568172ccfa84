from .gym_class import (
    fetch_classes,
    fetch_class,
    lock_class,
    create_class,
    update_class,
    delete_class,
)
from .booking import (
    fetch_bookings,
    fetch_member_bookings,
    fetch_booking,
    count_occupying,
    persist_booking,
    persist_booking_status,
)
from .check_in import fetch_check_ins, fetch_check_in, persist_check_in, persist_check_out
from .member import fetch_members, fetch_member, fetch_member_by_email, create_member, update_member
from .activity import persist_activity, fetch_activities, delete_old_activities
