import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gym_schedule import crud
from gym_schedule.core.clock import Clock
from gym_schedule.core.result import Result
from gym_schedule.database import transactional
from gym_schedule.errors.booking_errors import ClassNotFound
from gym_schedule.models import ActivityType, ClassStatus, GymClass
from gym_schedule.schemas.gym_class import GymClassCreate, GymClassUpdate
from gym_schedule.services.activity_log import ActivityEntry, ActivityLog, make_activity
from gym_schedule.services.enrollment_ledger import active_count, available_spots
from gym_schedule.services.schedule_resolver import (
    ClassSnapshot,
    Occurrence,
    next_class_occurrence,
    next_occurrence,
    upcoming_occurrences,
    weekly_schedule,
)
from gym_schedule.services.snapshots import class_snapshot, roster

logger = logging.getLogger(__name__)


class GymClassService:
    def __init__(self, db: Session, clock: Clock, activity_log: ActivityLog):
        self.db = db
        self.clock = clock
        self.activity_log = activity_log

    # --- Public Methods (Transactional) ---

    def create_class(self, class_data: GymClassCreate, current_user: Dict[str, Any]) -> GymClass:
        now = self.clock.now()
        with transactional(self.db) as session:
            gym_class = crud.create_class(session, class_data)
            activities = [
                make_activity(
                    ActivityType.CLASS_CREATED,
                    f"Class {gym_class.name} created",
                    now,
                    metadata={"classId": gym_class.id},
                    actor=current_user,
                )
            ]
            if class_data.schedule_slots:
                activities.append(
                    make_activity(
                        ActivityType.SCHEDULE_CREATED,
                        f"{len(class_data.schedule_slots)} schedule slot(s) added to {gym_class.name}",
                        now,
                        metadata={"classId": gym_class.id},
                        actor=current_user,
                    )
                )
            self._record(session, activities)

        self._publish(activities)
        logger.info(f"Class {gym_class.id} ({gym_class.name}) created")
        return gym_class

    def update_class(self, class_id: int, update_data: GymClassUpdate, current_user: Dict[str, Any]) -> GymClass:
        now = self.clock.now()
        with transactional(self.db) as session:
            gym_class = crud.update_class(session, class_id, update_data)
            if not gym_class:
                raise ClassNotFound(class_id)

            changed = sorted(update_data.model_dump(exclude_unset=True, exclude={"schedule_slots"}).keys())
            activities = []
            if changed:
                activities.append(
                    make_activity(
                        ActivityType.CLASS_UPDATED,
                        f"Class {gym_class.name} updated",
                        now,
                        metadata={"classId": class_id, "fields": changed},
                        actor=current_user,
                    )
                )
            if update_data.schedule_slots is not None:
                activities.append(
                    make_activity(
                        ActivityType.SCHEDULE_UPDATED,
                        f"Schedule of {gym_class.name} replaced ({len(update_data.schedule_slots)} slot(s))",
                        now,
                        metadata={"classId": class_id},
                        actor=current_user,
                    )
                )
            self._record(session, activities)

        self._publish(activities)
        logger.info(f"Class {class_id} updated")
        return gym_class

    def delete_class(self, class_id: int, current_user: Dict[str, Any]) -> None:
        now = self.clock.now()
        with transactional(self.db) as session:
            gym_class = crud.delete_class(session, class_id)
            if not gym_class:
                raise ClassNotFound(class_id)
            activities = [
                make_activity(
                    ActivityType.CLASS_DELETED,
                    f"Class {gym_class.name} deleted",
                    now,
                    metadata={"classId": class_id},
                    actor=current_user,
                )
            ]
            self._record(session, activities)

        self._publish(activities)
        logger.info(f"Class {class_id} deleted")

    # --- Public Methods (Read-only) ---

    def list_classes(self, status: Optional[ClassStatus] = None) -> List[GymClass]:
        return crud.fetch_classes(self.db, status=status)

    def get_class(self, class_id: int) -> GymClass:
        gym_class = crud.fetch_class(self.db, class_id)
        if not gym_class:
            raise ClassNotFound(class_id)
        return gym_class

    def upcoming(self, limit: Optional[int] = None) -> Dict[str, Any]:
        snapshots = [class_snapshot(gym_class) for gym_class in crud.fetch_classes(self.db)]
        by_id = {snapshot.id: snapshot for snapshot in snapshots}

        schedule = upcoming_occurrences(snapshots, self.clock.now(), limit=limit, tz=self.clock.tz)
        return {
            "occurrences": [self._occurrence_payload(by_id[o.class_id], o) for o in schedule.occurrences],
            "errors": [
                {"code": error.kind.value, "message": error.message, "context": error.context}
                for error in schedule.errors
            ],
        }

    def next_occurrence(self, class_id: int) -> Result[Optional[Dict[str, Any]]]:
        snapshot = class_snapshot(self.get_class(class_id))
        result = next_class_occurrence(snapshot, self.clock.now(), self.clock.tz)
        if not result.ok:
            return result
        if result.value is None:
            return Result.success(None)
        return Result.success(self._occurrence_payload(snapshot, result.value))

    def weekly_schedule(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Сетка на неделю по дням, у каждого слота ближайшая дата и число записавшихся
        """
        snapshots = [class_snapshot(gym_class) for gym_class in crud.fetch_classes(self.db)]
        now = self.clock.now()

        grid = {}
        for day_name, entries in weekly_schedule(snapshots).items():
            day_slots = []
            for snapshot, slot in entries:
                occurrence = next_occurrence(slot, now, self.clock.tz, class_id=snapshot.id).unwrap()
                payload = self._occurrence_payload(snapshot, occurrence)
                day_slots.append(
                    {
                        "class_id": snapshot.id,
                        "class_name": snapshot.name,
                        "day_of_week": slot.day_of_week,
                        "start_time": slot.start_time,
                        "end_time": slot.end_time,
                        "next_date": occurrence.date,
                        "capacity": snapshot.max_capacity,
                        "enrolled": payload["enrolled"],
                    }
                )
            grid[day_name] = day_slots
        return grid

    # --- Helpers ---

    def _occurrence_payload(self, snapshot: ClassSnapshot, occurrence: Occurrence) -> Dict[str, Any]:
        entries = roster(crud.fetch_bookings(self.db, snapshot.id, occurrence.date, occurrence.start_time))
        return {
            "class_id": snapshot.id,
            "class_name": snapshot.name,
            "day_of_week": occurrence.day_of_week,
            "date": occurrence.date,
            "start_time": occurrence.start_time,
            "end_time": occurrence.end_time,
            "capacity": snapshot.max_capacity,
            "enrolled": active_count(entries, occurrence.key),
            "available_spots": available_spots(entries, occurrence.key, snapshot.max_capacity),
        }

    def _record(self, session: Session, activities: List[ActivityEntry]) -> None:
        for activity in activities:
            crud.persist_activity(session, activity)

    def _publish(self, activities: List[ActivityEntry]) -> None:
        for activity in activities:
            self.activity_log.append(activity)
