# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

TITLE_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 500
MAX_TAGS = 10
TAG_MAX_LEN = 50


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: Any) -> Priority | None:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


_PRIORITY_RANK = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_due(raw: Any) -> date | datetime | None:
    """
    Parse a due date given as an ISO calendar date, an ISO timestamp,
    or a date/datetime object.

    None and blank strings mean "no deadline". Raises ValueError otherwise.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return _in_utc_range(raw)
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"unsupported due date type: {type(raw).__name__}")

    s = raw.strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return _in_utc_range(datetime.fromisoformat(s))


def _in_utc_range(ts: datetime) -> datetime:
    # An offset near year 1 or 9999 can push the UTC instant out of range.
    if ts.tzinfo is not None:
        try:
            ts.astimezone(UTC)
        except OverflowError as e:
            raise ValueError(f"due date out of range: {ts.isoformat()}") from e
    return ts


def normalize_due(raw: Any) -> str | None:
    """Canonical string form stored on Task.due_date."""
    parsed = parse_due(raw)
    if parsed is None:
        return None
    return parsed.isoformat()


def due_day(due: str | None) -> date | None:
    """Calendar day of a due date (timestamps are truncated in their own offset)."""
    parsed = parse_due(due)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        return parsed.date()
    return parsed


def due_instant(due: str | None) -> datetime | None:
    """Comparable UTC instant: plain dates map to midnight, naive timestamps are taken as UTC."""
    parsed = parse_due(due)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC)


def normalize_tags(raw: Any) -> tuple[str, ...]:
    """Trimmed tags with blanks dropped; None means no tags."""
    if raw is None:
        return ()
    return tuple(tag.strip() for tag in raw if tag.strip())


def _parse_ts(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {type(raw).__name__}")
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


@dataclass(slots=True, frozen=True)
class Task:
    """
    A single task record.

    Instances are immutable; the manager derives new instances with
    dataclasses.replace on every mutation, so handing them out is safe.
    """

    id: str
    title: str
    description: str
    priority: Priority
    completed: bool
    due_date: str | None
    created_at: datetime
    updated_at: datetime
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Wire/persisted form (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "completed": self.completed,
            "dueDate": self.due_date,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def to_payload(self) -> dict[str, Any]:
        """Editable fields only, in the shape accepted by create/update."""
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "completed": self.completed,
            "dueDate": self.due_date,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Decode a persisted record.

        Raises ValueError (or KeyError/TypeError) on records that cannot be
        interpreted; the store turns those into StorageError.
        """
        if not isinstance(raw, dict):
            raise ValueError("task record must be an object")

        task_id = raw["id"]
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task id must be a non-empty string")

        title = raw["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"task {task_id} has no title")

        description = raw.get("description") or ""
        if not isinstance(description, str):
            raise ValueError(f"task {task_id} has a non-string description")

        priority = Priority.parse(raw.get("priority") or Priority.MEDIUM.value)
        if priority is None:
            raise ValueError(f"unknown priority {raw.get('priority')!r} for task {task_id}")

        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"task {task_id} has a non-boolean completed flag: {completed!r}")

        tags = raw.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValueError(f"task {task_id} tags must be a list of strings")

        return cls(
            id=task_id,
            title=title,
            description=description,
            priority=priority,
            completed=completed,
            due_date=normalize_due(raw.get("dueDate")),
            created_at=_parse_ts(raw["createdAt"]),
            updated_at=_parse_ts(raw["updatedAt"]),
            tags=tuple(tags),
        )
