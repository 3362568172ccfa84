"""
Bounded in-memory feed of domain events, newest first.

Once the limit is reached the oldest entries are dropped silently.
"""
import logging
import random
import string
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, Iterable, List, Optional

from gym_schedule.config import config
from gym_schedule.models.activity import ActivityType

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class ActivityEntry:
    id: str
    type: ActivityType
    message: str
    timestamp: datetime
    member_id: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    updated_by_user_id: Optional[Any] = None
    updated_by_name: Optional[str] = None
    updated_by_role: Optional[str] = None


def new_activity_id(now: datetime) -> str:
    # Ключ для списка в UI, не токен безопасности
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"act_{int(now.timestamp() * 1000)}_{suffix}"


def make_activity(
    activity_type: ActivityType,
    message: str,
    now: datetime,
    member_id: Optional[Any] = None,
    metadata: Optional[Dict[str, Any]] = None,
    actor: Optional[Dict[str, Any]] = None,
) -> ActivityEntry:
    actor = actor or {}
    return ActivityEntry(
        id=new_activity_id(now),
        type=activity_type,
        message=message,
        timestamp=now,
        member_id=member_id,
        metadata=dict(metadata or {}),
        updated_by_user_id=actor.get("id"),
        updated_by_name=actor.get("email"),
        updated_by_role=actor.get("role"),
    )


class ActivityLog:
    def __init__(self, limit: Optional[int] = None):
        self.limit = config.ACTIVITY_LOG_LIMIT if limit is None else limit
        self._entries: Deque[ActivityEntry] = deque(maxlen=self.limit)
        self._lock = threading.Lock()

    def append(self, entry: ActivityEntry) -> None:
        with self._lock:
            self._entries.appendleft(entry)
        logger.debug(f"Activity {entry.type.value}: {entry.message}")

    def extend(self, entries: Iterable[ActivityEntry]) -> None:
        """Appends entries given oldest first, e.g. when warming up from storage."""
        for entry in entries:
            self.append(entry)

    def entries(
        self,
        limit: Optional[int] = None,
        member_id: Optional[Any] = None,
        activity_type: Optional[ActivityType] = None,
    ) -> List[ActivityEntry]:
        with self._lock:
            snapshot = list(self._entries)

        if member_id is not None:
            snapshot = [entry for entry in snapshot if entry.member_id == member_id]
        if activity_type is not None:
            snapshot = [entry for entry in snapshot if entry.type == activity_type]
        if limit is not None:
            snapshot = snapshot[:limit]
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
