# src/taskflow/tasks/task_query.py

from __future__ import annotations

"""
Read-side query evaluation.

Everything here is pure: functions take a snapshot of tasks and return a new
list, never touching the input.
"""

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.results import Result
from .task_models import Priority, Task, due_instant

DEFAULT_PAGE_LIMIT = 50

_INT_RE = re.compile(r"-?[0-9]+")


class StatusFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


class SortKey(StrEnum):
    TITLE = "title"
    PRIORITY = "priority"
    CREATED = "created"
    DUE_DATE = "dueDate"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


# Direction used when the caller does not pass an explicit order.
_NATURAL_ORDER = {
    SortKey.TITLE: SortOrder.ASC,
    SortKey.PRIORITY: SortOrder.DESC,
    SortKey.CREATED: SortOrder.DESC,
    SortKey.DUE_DATE: SortOrder.ASC,
}


@dataclass(slots=True, frozen=True)
class TaskFilter:
    status: StatusFilter = StatusFilter.ALL
    priority: Priority | None = None  # None == "all"
    search: str = ""

    def matches(self, task: Task) -> bool:
        if self.status is StatusFilter.COMPLETED and not task.completed:
            return False
        if self.status is StatusFilter.PENDING and task.completed:
            return False
        if self.priority is not None and task.priority is not self.priority:
            return False
        needle = self.search.casefold()
        if needle:
            return needle in task.title.casefold() or needle in task.description.casefold()
        return True


@dataclass(slots=True, frozen=True)
class TaskSort:
    key: SortKey = SortKey.DUE_DATE
    order: SortOrder | None = None

    @property
    def descending(self) -> bool:
        return (self.order or _NATURAL_ORDER[self.key]) is SortOrder.DESC


@dataclass(slots=True, frozen=True)
class TaskQuery:
    task_filter: TaskFilter = field(default_factory=TaskFilter)
    sort: TaskSort = field(default_factory=TaskSort)
    limit: int | None = DEFAULT_PAGE_LIMIT
    offset: int = 0


@dataclass(slots=True, frozen=True)
class QueryPage:
    items: tuple[Task, ...]
    total: int
    limit: int | None
    offset: int

    @property
    def count(self) -> int:
        return len(self.items)

    def meta(self) -> dict[str, Any]:
        return {"total": self.total, "limit": self.limit, "offset": self.offset, "count": self.count}

    def to_dict(self) -> dict[str, Any]:
        return {"data": [t.to_dict() for t in self.items], "meta": self.meta()}


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.TITLE: lambda t: t.title.casefold(),
    SortKey.PRIORITY: lambda t: t.priority.rank,
    SortKey.CREATED: lambda t: t.created_at,
}


def _sort_by_due(tasks: list[Task], descending: bool) -> list[Task]:
    dated: list[tuple[datetime, Task]] = []
    undated: list[Task] = []
    for t in tasks:
        when = due_instant(t.due_date)
        if when is None:
            undated.append(t)
        else:
            dated.append((when, t))
    dated.sort(key=lambda pair: pair[0], reverse=descending)
    # No-deadline tasks go last in either direction, in their incoming order.
    return [t for _, t in dated] + undated


def sort_tasks(tasks: Iterable[Task], sort: TaskSort) -> list[Task]:
    """Stable sort; equal keys keep their incoming order."""
    items = list(tasks)
    if sort.key is SortKey.DUE_DATE:
        return _sort_by_due(items, sort.descending)
    items.sort(key=_SORT_KEYS[sort.key], reverse=sort.descending)
    return items


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    return [t for t in tasks if task_filter.matches(t)]


def apply(tasks: Iterable[Task], task_filter: TaskFilter | None = None, sort: TaskSort | None = None) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, task_filter or TaskFilter()), sort or TaskSort())


def paginate(tasks: Sequence[Task], *, offset: int = 0, limit: int | None = None) -> list[Task]:
    """Plain slice; an offset past the end yields an empty page."""
    start = max(0, offset)
    if limit is None:
        return list(tasks[start:])
    return list(tasks[start : start + max(0, limit)])


def run_query(tasks: Iterable[Task], query: TaskQuery) -> QueryPage:
    ordered = apply(tasks, query.task_filter, query.sort)
    page = paginate(ordered, offset=query.offset, limit=query.limit)
    return QueryPage(items=tuple(page), total=len(ordered), limit=query.limit, offset=query.offset)


def _parse_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not _INT_RE.fullmatch(raw.strip()):
        return None
    try:
        return int(raw.strip())
    except ValueError:
        # more digits than int() accepts from a string
        return None


def parse_query(
    params: Mapping[str, Any],
    *,
    default_limit: int | None = DEFAULT_PAGE_LIMIT,
    max_limit: int | None = None,
) -> Result[TaskQuery]:
    """
    Build a TaskQuery from wire parameters:
    status, priority, search, sortBy, order, limit, offset.

    All problems are reported together as validation errors.
    """
    errors: list[str] = []

    status = StatusFilter.ALL
    raw_status = params.get("status")
    if raw_status not in (None, ""):
        try:
            status = StatusFilter(raw_status)
        except ValueError:
            errors.append("invalid status filter")

    priority: Priority | None = None
    raw_priority = params.get("priority")
    if raw_priority not in (None, "", "all"):
        priority = Priority.parse(raw_priority)
        if priority is None:
            errors.append("invalid priority filter")

    search = params.get("search") or ""
    if not isinstance(search, str):
        errors.append("invalid search")
        search = ""

    key = SortKey.DUE_DATE
    raw_key = params.get("sortBy")
    if raw_key not in (None, ""):
        try:
            key = SortKey(raw_key)
        except ValueError:
            errors.append("invalid sort key")

    order: SortOrder | None = None
    raw_order = params.get("order")
    if raw_order not in (None, ""):
        try:
            order = SortOrder(str(raw_order).lower())
        except ValueError:
            errors.append("invalid sort order")

    limit = default_limit
    raw_limit = params.get("limit")
    if raw_limit not in (None, ""):
        parsed = _parse_int(raw_limit)
        if parsed is None or parsed < 0 or (max_limit is not None and parsed > max_limit):
            errors.append("invalid limit")
        else:
            limit = parsed

    offset = 0
    raw_offset = params.get("offset")
    if raw_offset not in (None, ""):
        parsed = _parse_int(raw_offset)
        if parsed is None or parsed < 0:
            errors.append("invalid offset")
        else:
            offset = parsed

    if errors:
        return Result.invalid(errors)

    return Result.success(
        TaskQuery(
            task_filter=TaskFilter(status=status, priority=priority, search=search),
            sort=TaskSort(key=key, order=order),
            limit=limit,
            offset=offset,
        )
    )
