import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from gym_schedule.core.result import ErrorKind, Result
from gym_schedule.crud.gym_class import lock_class
from gym_schedule.models import OCCUPYING_STATUSES, Booking, BookingStatus
from gym_schedule.services.enrollment_ledger import RosterEntry

logger = logging.getLogger(__name__)


def fetch_bookings(
    db: Session,
    class_id: Optional[int] = None,
    booking_date: Optional[date] = None,
    start_time: Optional[str] = None,
) -> List[Booking]:
    """
    Все записи (включая отменённые), опционально по занятию, дате и времени
    """
    query = db.query(Booking)
    if class_id is not None:
        query = query.filter(Booking.class_id == class_id)
    if booking_date is not None:
        query = query.filter(Booking.booking_date == booking_date)
    if start_time is not None:
        query = query.filter(Booking.start_time == start_time)
    return query.order_by(Booking.created_at, Booking.id).all()


def fetch_member_bookings(
    db: Session,
    *,
    member_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    from_date: Optional[date] = None,
) -> List[Booking]:
    query = db.query(Booking).options(joinedload(Booking.gym_class))
    if member_id:
        query = query.filter(Booking.member_id == member_id)
    if status:
        query = query.filter(Booking.status == status)
    if from_date:
        query = query.filter(Booking.booking_date >= from_date)
    return query.order_by(Booking.booking_date, Booking.start_time, Booking.id).all()


def fetch_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return db.query(Booking).filter(Booking.id == booking_id).first()


def count_occupying(db: Session, class_id: int, booking_date: date, start_time: str) -> int:
    return (
        db.query(func.count(Booking.id))
        .filter(
            Booking.class_id == class_id,
            Booking.booking_date == booking_date,
            Booking.start_time == start_time,
            Booking.status.in_(OCCUPYING_STATUSES),
        )
        .scalar()
    )


def persist_booking(db: Session, entry: RosterEntry, class_capacity: int) -> Result[Booking]:
    """
    Сохраняет новую запись. Вызывается внутри transactional().

    Строка занятия блокируется, после чего количество занятых мест и дубликат
    проверяются ещё раз: два параллельных запроса не могут оба занять
    последнее место. Уникальный частичный индекс закрывает гонку дубликатов.
    """
    lock_class(db, entry.class_id)

    duplicate = (
        db.query(Booking)
        .filter(
            Booking.class_id == entry.class_id,
            Booking.booking_date == entry.booking_date,
            Booking.start_time == entry.start_time,
            Booking.member_id == entry.member_id,
            Booking.status != BookingStatus.CANCELLED,
        )
        .first()
    )
    if duplicate:
        return Result.failure(
            ErrorKind.DUPLICATE_BOOKING,
            "Member is already booked for this class",
            booking_id=duplicate.id,
        )

    enrolled = count_occupying(db, entry.class_id, entry.booking_date, entry.start_time)
    if enrolled >= class_capacity:
        logger.info(
            f"Capacity re-check rejected booking for class {entry.class_id} "
            f"on {entry.booking_date} {entry.start_time}: {enrolled}/{class_capacity}"
        )
        return Result.failure(
            ErrorKind.CAPACITY_EXCEEDED,
            "This class is full",
            capacity=class_capacity,
            enrolled=enrolled,
        )

    booking = Booking(
        class_id=entry.class_id,
        member_id=entry.member_id,
        booking_date=entry.booking_date,
        start_time=entry.start_time,
        status=BookingStatus.CONFIRMED,
        created_at=entry.created_at,
    )
    db.add(booking)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.warning(
            f"Concurrent duplicate booking for member {entry.member_id} "
            f"on class {entry.class_id} {entry.booking_date} {entry.start_time}"
        )
        return Result.failure(ErrorKind.DUPLICATE_BOOKING, "Member is already booked for this class")

    return Result.success(booking)


def persist_booking_status(
    db: Session,
    entry: RosterEntry,
    expected_status: BookingStatus,
) -> Result[Booking]:
    """
    Применяет переход статуса, если запись всё ещё в expected_status.
    """
    booking = db.query(Booking).filter(Booking.id == entry.id).with_for_update().first()
    if booking is None or BookingStatus(booking.status) != expected_status:
        current = BookingStatus(booking.status).value if booking else None
        return Result.failure(
            ErrorKind.INVALID_STATE,
            "Booking status changed concurrently",
            booking_id=entry.id,
            status=current,
        )

    booking.status = entry.status
    booking.cancelled_at = entry.cancelled_at
    booking.attended_at = entry.attended_at
    db.flush()
    return Result.success(booking)
