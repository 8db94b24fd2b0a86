"""
Storage-agnostic reading log and goal access

The progress and streak engines only ever see `ReadingEntry` snapshots
obtained through a `LogSource`. Concrete stores:

- `SqlReadingStore` (app.services.sql_store): relational database
- `MemoryReadingStore`: in-process store, used for the local copy and tests
- `SnapshotLogSource`: read-only view over the Redis log snapshot
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class ReadingEntry:
    """Immutable snapshot of one reading log"""
    id: int
    user_id: int
    date: date
    juz_number: int
    pages_read: int
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_model(cls, log) -> "ReadingEntry":
        return cls(
            id=log.id,
            user_id=log.user_id,
            date=log.date,
            juz_number=log.juz_number,
            pages_read=log.pages_read,
            start_page=log.start_page,
            end_page=log.end_page,
            created_at=log.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReadingEntry":
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            date=date.fromisoformat(data["date"]),
            juz_number=data["juz_number"],
            pages_read=data["pages_read"],
            start_page=data.get("start_page"),
            end_page=data.get("end_page"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass(frozen=True)
class GoalRecord:
    """Immutable snapshot of one reading goal"""
    id: int
    user_id: int
    total_pages: int = 604
    daily_target: int = 5
    weekly_target: int = 35
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


def newest_first(entries: List[ReadingEntry]) -> List[ReadingEntry]:
    """Order by date descending, then creation time descending"""
    return sorted(entries, key=lambda e: (e.date, e.created_at, e.id), reverse=True)


def oldest_first(entries: List[ReadingEntry]) -> List[ReadingEntry]:
    """Order by date ascending, then creation time ascending"""
    return sorted(entries, key=lambda e: (e.date, e.created_at, e.id))


class LogSource(ABC):
    """Read capability over a user's reading log history"""

    @abstractmethod
    def get_logs(self, user_id: int) -> List[ReadingEntry]:
        """All logs of a user, newest first"""

    def get_recent_logs(self, user_id: int, limit: int) -> List[ReadingEntry]:
        return self.get_logs(user_id)[:limit]

    def get_logs_in_range(self, user_id: int, start_date: date, end_date: date) -> List[ReadingEntry]:
        """Logs dated within [start_date, end_date], oldest first"""
        return oldest_first([
            e for e in self.get_logs(user_id)
            if start_date <= e.date <= end_date
        ])

    def get_logs_by_juz(self, user_id: int, juz_number: int) -> List[ReadingEntry]:
        return [e for e in self.get_logs(user_id) if e.juz_number == juz_number]


class ReadingStore(LogSource):
    """Persistence collaborator: log history plus goals"""

    @abstractmethod
    def append_log(self, user_id: int, fields: Dict[str, Any]) -> ReadingEntry:
        """Append a log and return it with its assigned id"""

    @abstractmethod
    def get_active_goal(self, user_id: int):
        """Active goal of a user or None"""

    @abstractmethod
    def create_goal(self, user_id: int, fields: Dict[str, Any]):
        """
        Persist a new goal

        An active goal deactivates every other goal of the user in the
        same atomic step.
        """

    @abstractmethod
    def update_goal(self, goal_id: int, fields: Dict[str, Any]):
        """
        Update a goal, returning None when it does not exist

        Activating a goal deactivates its siblings in the same atomic step.
        """

    @abstractmethod
    def clear_user_data(self, user_id: int) -> None:
        """Delete every log and goal of a user"""


class MemoryReadingStore(ReadingStore):
    """
    In-process store

    Each mutation builds the new state and swaps it in under a lock, so
    readers always see a consistent snapshot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._logs: List[ReadingEntry] = []
        self._goals: List[GoalRecord] = []
        self._next_log_id = 1
        self._next_goal_id = 1

    def get_logs(self, user_id: int) -> List[ReadingEntry]:
        return newest_first([e for e in self._logs if e.user_id == user_id])

    def append_log(self, user_id: int, fields: Dict[str, Any]) -> ReadingEntry:
        with self._lock:
            entry = ReadingEntry(id=self._next_log_id, user_id=user_id, **fields)
            self._logs = self._logs + [entry]
            self._next_log_id += 1
        logger.debug(f"Stored log {entry.id} for user {user_id}")
        return entry

    def get_active_goal(self, user_id: int) -> Optional[GoalRecord]:
        for goal in self._goals:
            if goal.user_id == user_id and goal.is_active:
                return goal
        return None

    def create_goal(self, user_id: int, fields: Dict[str, Any]) -> GoalRecord:
        with self._lock:
            goal = GoalRecord(id=self._next_goal_id, user_id=user_id, **fields)
            goals = self._goals
            if goal.is_active:
                goals = self._deactivate_siblings(goals, user_id, keep_id=goal.id)
            self._goals = goals + [goal]
            self._next_goal_id += 1
        return goal

    def update_goal(self, goal_id: int, fields: Dict[str, Any]) -> Optional[GoalRecord]:
        with self._lock:
            current = next((g for g in self._goals if g.id == goal_id), None)
            if current is None:
                return None

            updated = replace(current, updated_at=_utcnow(), **fields)
            goals = self._goals
            if updated.is_active:
                goals = self._deactivate_siblings(goals, updated.user_id, keep_id=goal_id)
            self._goals = [updated if g.id == goal_id else g for g in goals]
        return updated

    def clear_user_data(self, user_id: int) -> None:
        with self._lock:
            self._logs = [e for e in self._logs if e.user_id != user_id]
            self._goals = [g for g in self._goals if g.user_id != user_id]

    @staticmethod
    def _deactivate_siblings(goals: List[GoalRecord], user_id: int, keep_id: int) -> List[GoalRecord]:
        now = _utcnow()
        return [
            replace(g, is_active=False, updated_at=now)
            if g.user_id == user_id and g.is_active and g.id != keep_id else g
            for g in goals
        ]


class SnapshotLogSource(LogSource):
    """Read-only log source backed by the Redis log snapshot"""

    def __init__(self, cache):
        self.cache = cache

    def get_logs(self, user_id: int) -> List[ReadingEntry]:
        raw = self.cache.get_log_snapshot(user_id) or []
        return newest_first([ReadingEntry.from_dict(item) for item in raw])

    def store(self, user_id: int, entries: List[ReadingEntry]) -> bool:
        return self.cache.set_log_snapshot(user_id, [e.to_dict() for e in entries])


class FallbackLogSource(LogSource):
    """
    Reads from the primary source and mirrors the result into the snapshot.
    When the primary raises one of `errors`, the snapshot is served instead.
    """

    def __init__(self, primary: LogSource, snapshot: SnapshotLogSource, errors=(Exception,)):
        self.primary = primary
        self.snapshot = snapshot
        self.errors = errors

    def get_logs(self, user_id: int) -> List[ReadingEntry]:
        try:
            entries = self.primary.get_logs(user_id)
        except self.errors as e:
            logger.warning(f"Primary log source unavailable ({e}); serving offline snapshot for user {user_id}")
            return self.snapshot.get_logs(user_id)

        self.snapshot.store(user_id, entries)
        return entries
