"""
Weekly recurring slots -> concrete upcoming occurrences.

Days are numbered 0 = Sunday ... 6 = Saturday and times are zero-padded
"HH:MM" strings, so comparing them as strings orders them correctly.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from gym_schedule.config import config
from gym_schedule.core.clock import TimezoneLike, day_of_week, to_local
from gym_schedule.core.result import DomainError, ErrorKind, Result
from gym_schedule.models.gym_class import ClassStatus

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
FALLBACK_DAY = 1  # Monday


@dataclass(frozen=True)
class SlotRule:
    day_of_week: int
    start_time: str
    end_time: str
    slot_id: Optional[Any] = None


@dataclass(frozen=True)
class ClassSnapshot:
    id: Any
    name: str
    status: str
    max_capacity: int
    slots: Tuple[SlotRule, ...] = ()


@dataclass(frozen=True)
class OccurrenceKey:
    class_id: Any
    date: date
    start_time: str

    def __str__(self) -> str:
        return f"{self.class_id}:{self.date.isoformat()}:{self.start_time}"

    def as_dict(self) -> Dict[str, Any]:
        return {"classId": self.class_id, "date": self.date.isoformat(), "startTime": self.start_time}


@dataclass(frozen=True)
class Occurrence:
    class_id: Any
    slot: SlotRule
    date: date
    start_time: str
    end_time: str

    @property
    def key(self) -> OccurrenceKey:
        return OccurrenceKey(class_id=self.class_id, date=self.date, start_time=self.start_time)

    @property
    def day_of_week(self) -> int:
        return self.slot.day_of_week


@dataclass
class UpcomingSchedule:
    occurrences: List[Occurrence] = field(default_factory=list)
    errors: List[DomainError] = field(default_factory=list)


def parse_day_of_week(value: Union[int, str, None]) -> int:
    """
    Accepts a day number or a free-text day name ("monday", "Mon").

    Unknown names fall back to Monday with a warning. Out-of-range numbers are
    returned as is, validate_slot reports them.
    """
    if isinstance(value, int):
        return value

    text = str(value or "").strip()
    if text.lstrip("-").isdigit():
        return int(text)

    key = text.lower()
    for index, name in enumerate(DAY_NAMES):
        if key == name.lower() or key == name[:3].lower():
            return index

    logger.warning(
        f"Data quality: unrecognized day of week {value!r}, falling back to {DAY_NAMES[FALLBACK_DAY]}"
    )
    return FALLBACK_DAY


def normalize_time_of_day(value: Union[str, time, None]) -> Optional[str]:
    """Returns "HH:MM" or None when the value is not a valid time of day."""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if not value:
        return None

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return f"{hours:02d}:{minutes:02d}"


def _configuration_error(message: str, **context: Any) -> Result:
    logger.error(f"Schedule configuration error: {message} {context}")
    return Result.failure(ErrorKind.CONFIGURATION_ERROR, message, **context)


def validate_slot(slot: SlotRule) -> Result[SlotRule]:
    day = slot.day_of_week
    if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
        return _configuration_error("dayOfWeek must be between 0 and 6", slot_id=slot.slot_id, day_of_week=day)

    start = normalize_time_of_day(slot.start_time)
    end = normalize_time_of_day(slot.end_time)
    if start is None or end is None:
        return _configuration_error(
            "startTime and endTime must be HH:MM",
            slot_id=slot.slot_id,
            start_time=slot.start_time,
            end_time=slot.end_time,
        )
    if start >= end:
        return _configuration_error(
            "startTime must be earlier than endTime",
            slot_id=slot.slot_id,
            start_time=start,
            end_time=end,
        )

    return Result.success(SlotRule(day_of_week=day, start_time=start, end_time=end, slot_id=slot.slot_id))


def next_occurrence(
    slot: SlotRule,
    reference: datetime,
    tz: TimezoneLike = None,
    class_id: Optional[Any] = None,
) -> Result[Occurrence]:
    checked = validate_slot(slot)
    if not checked.ok:
        return checked
    rule = checked.value

    local = to_local(reference, tz)
    current_day = day_of_week(local)
    current_time = local.strftime("%H:%M")

    if rule.day_of_week == current_day and rule.start_time > current_time:
        days_ahead = 0
    elif rule.day_of_week > current_day:
        days_ahead = rule.day_of_week - current_day
    else:
        # Уже прошло на этой неделе, переносим на следующую
        days_ahead = 7 - (current_day - rule.day_of_week)

    occurrence_date = local.date() + timedelta(days=days_ahead)
    logger.debug(f"Slot {rule} resolved to {occurrence_date} from {local.isoformat()}")
    return Result.success(
        Occurrence(
            class_id=class_id,
            slot=rule,
            date=occurrence_date,
            start_time=rule.start_time,
            end_time=rule.end_time,
        )
    )


def _occurrence_order(occurrence: Occurrence) -> Tuple[date, str]:
    return occurrence.date, occurrence.start_time


def next_class_occurrence(
    gym_class: ClassSnapshot,
    reference: datetime,
    tz: TimezoneLike = None,
) -> Result[Optional[Occurrence]]:
    """
    Nearest occurrence among the class's slots.

    Taking the minimum over all slots gives the first slot still ahead this
    week, otherwise the earliest-day slot of next week. A class without slots
    resolves to None.
    """
    if not gym_class.slots:
        return Result.success(None)

    candidates: List[Occurrence] = []
    for slot in gym_class.slots:
        result = next_occurrence(slot, reference, tz, class_id=gym_class.id)
        if not result.ok:
            return Result.from_error(result.error)
        candidates.append(result.value)

    return Result.success(min(candidates, key=_occurrence_order))


def _class_id_order(class_id: Any) -> Tuple[int, Any]:
    if isinstance(class_id, int):
        return 0, class_id
    return 1, str(class_id)


def upcoming_occurrences(
    classes: Iterable[ClassSnapshot],
    reference: datetime,
    limit: Optional[int] = None,
    tz: TimezoneLike = None,
) -> UpcomingSchedule:
    if limit is None:
        limit = config.UPCOMING_CLASSES_LIMIT

    schedule = UpcomingSchedule()
    for gym_class in classes:
        if gym_class.status != ClassStatus.ACTIVE:
            continue
        result = next_class_occurrence(gym_class, reference, tz)
        if not result.ok:
            schedule.errors.append(result.error)
            continue
        if result.value is not None:
            schedule.occurrences.append(result.value)

    schedule.occurrences.sort(
        key=lambda occurrence: (occurrence.date, occurrence.start_time, _class_id_order(occurrence.class_id))
    )
    schedule.occurrences = schedule.occurrences[:limit]
    return schedule


def weekly_schedule(
    classes: Sequence[ClassSnapshot],
) -> Dict[str, List[Tuple[ClassSnapshot, SlotRule]]]:
    """
    Active classes' valid slots grouped by day name, each day ordered by start time.
    Malformed slots are left out and logged by validate_slot.
    """
    grouped: Dict[str, List[Tuple[ClassSnapshot, SlotRule]]] = {name: [] for name in DAY_NAMES}
    for gym_class in classes:
        if gym_class.status != ClassStatus.ACTIVE:
            continue
        for slot in gym_class.slots:
            checked = validate_slot(slot)
            if checked.ok:
                grouped[DAY_NAMES[checked.value.day_of_week]].append((gym_class, checked.value))

    for entries in grouped.values():
        entries.sort(key=lambda pair: (pair[1].start_time, _class_id_order(pair[0].id)))
    return grouped
