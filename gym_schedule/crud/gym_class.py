import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from gym_schedule.models import ClassStatus, GymClass, ScheduleSlot
from gym_schedule.schemas.gym_class import GymClassCreate, GymClassUpdate, ScheduleSlotCreate

logger = logging.getLogger(__name__)


def fetch_classes(db: Session, *, status: Optional[ClassStatus] = None) -> List[GymClass]:
    """
    Получение списка занятий вместе со слотами расписания
    """
    query = db.query(GymClass).options(selectinload(GymClass.schedule_slots))
    if status:
        query = query.filter(GymClass.status == status)
    return query.order_by(GymClass.id).all()


def fetch_class(db: Session, class_id: int) -> Optional[GymClass]:
    return (
        db.query(GymClass)
        .options(selectinload(GymClass.schedule_slots))
        .filter(GymClass.id == class_id)
        .first()
    )


def lock_class(db: Session, class_id: int) -> Optional[GymClass]:
    """SELECT ... FOR UPDATE on the class row; serializes writers per class."""
    return db.query(GymClass).filter(GymClass.id == class_id).with_for_update().first()


def _build_slots(slots: List[ScheduleSlotCreate]) -> List[ScheduleSlot]:
    return [
        ScheduleSlot(day_of_week=slot.day_of_week, start_time=slot.start_time, end_time=slot.end_time)
        for slot in slots
    ]


def create_class(db: Session, class_data: GymClassCreate) -> GymClass:
    db_class = GymClass(
        name=class_data.name,
        description=class_data.description,
        duration_minutes=class_data.duration_minutes,
        max_capacity=class_data.max_capacity,
        difficulty=class_data.difficulty,
        category=class_data.category,
        price=class_data.price,
        status=class_data.status,
    )
    db_class.schedule_slots = _build_slots(class_data.schedule_slots)
    db.add(db_class)
    db.flush()
    return db_class


def update_class(db: Session, class_id: int, update_data: GymClassUpdate) -> Optional[GymClass]:
    db_class = fetch_class(db, class_id)
    if not db_class:
        return None

    update_dict = update_data.model_dump(exclude_unset=True, exclude={"schedule_slots"})
    for field, value in update_dict.items():
        setattr(db_class, field, value)

    # Слоты заменяются целиком
    if update_data.schedule_slots is not None:
        db_class.schedule_slots = _build_slots(update_data.schedule_slots)

    db.flush()
    return db_class


def delete_class(db: Session, class_id: int) -> Optional[GymClass]:
    db_class = fetch_class(db, class_id)
    if not db_class:
        return None
    db.delete(db_class)
    db.flush()
    return db_class
