# src/taskflow/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from .task_models import Priority, Task, due_day, utc_now


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    by_priority: dict[Priority, int] = field(default_factory=lambda: {p: 0 for p in Priority})
    completion_rate: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "overdue": self.overdue,
            "byPriority": {p.value: n for p, n in self.by_priority.items()},
            "completionRate": self.completion_rate,
        }


def completion_rate(completed: int, total: int) -> int:
    """Percentage rounded half-up; 0 for an empty collection."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


def is_overdue(task: Task, today: date) -> bool:
    if task.completed:
        return False
    day = due_day(task.due_date)
    return day is not None and day < today


def summarize(tasks: Iterable[Task], today: date | None = None) -> TaskStats:
    """
    Aggregate counts over a task snapshot.

    Overdue uses day granularity: a task due today is not overdue yet.
    """
    today = today or date.today()
    by_priority = {p: 0 for p in Priority}
    total = completed = overdue = 0

    for t in tasks:
        total += 1
        by_priority[t.priority] += 1
        if t.completed:
            completed += 1
        elif is_overdue(t, today):
            overdue += 1

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        by_priority=by_priority,
        completion_rate=completion_rate(completed, total),
    )


def tasks_by_priority(tasks: Iterable[Task]) -> dict[Priority, list[Task]]:
    groups: dict[Priority, list[Task]] = {p: [] for p in sorted(Priority, key=lambda p: p.rank, reverse=True)}
    for t in tasks:
        groups[t.priority].append(t)
    return groups


def days_until_due(task: Task, today: date | None = None) -> int | None:
    day = due_day(task.due_date)
    if day is None:
        return None
    return (day - (today or date.today())).days


def urgency_label(task: Task, today: date | None = None) -> str:
    """
    Coarse urgency bucket for display:
    no-date, overdue, today, tomorrow, urgent (<= 3 days), upcoming (<= 7 days), future.
    """
    days = days_until_due(task, today)
    if days is None:
        return "no-date"
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days <= 3:
        return "urgent"
    if days <= 7:
        return "upcoming"
    return "future"


# ---- productivity ----

TREND_IMPROVING = "improving"
TREND_STABLE = "stable"
TREND_DECLINING = "declining"


@dataclass(slots=True, frozen=True)
class PeriodCounts:
    week: int = 0
    month: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"week": self.week, "month": self.month, "total": self.total}


@dataclass(slots=True, frozen=True)
class ProductivityStats:
    """
    Activity over the last 7 and 30 days.

    Completion is dated by updated_at, the closest thing to a completion
    timestamp the record carries.
    """

    completion: PeriodCounts
    creation: PeriodCounts
    overdue_count: int
    overdue_percentage: int
    average_completion: int
    trend: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "completion": self.completion.to_dict(),
            "creation": self.creation.to_dict(),
            "overdue": {"count": self.overdue_count, "percentage": self.overdue_percentage},
            "averageCompletion": self.average_completion,
            "trends": {"productivity": self.trend},
        }


def _trend(completion: PeriodCounts, creation: PeriodCounts) -> str:
    week = completion.week / creation.week if creation.week else 0.0
    month = completion.month / creation.month if creation.month else 0.0
    if week > month * 1.2:
        return TREND_IMPROVING
    if week < month * 0.8:
        return TREND_DECLINING
    return TREND_STABLE


def productivity_stats(tasks: Iterable[Task], now: datetime | None = None) -> ProductivityStats:
    now = now or utc_now()
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    created_week = created_month = total = 0
    done_week = done_month = done_total = 0
    overdue = 0

    for t in tasks:
        total += 1
        if t.created_at >= week_ago:
            created_week += 1
        if t.created_at >= month_ago:
            created_month += 1
        if t.completed:
            done_total += 1
            if t.updated_at >= week_ago:
                done_week += 1
            if t.updated_at >= month_ago:
                done_month += 1
        elif is_overdue(t, now.date()):
            overdue += 1

    completion = PeriodCounts(week=done_week, month=done_month, total=done_total)
    creation = PeriodCounts(week=created_week, month=created_month, total=total)
    return ProductivityStats(
        completion=completion,
        creation=creation,
        overdue_count=overdue,
        overdue_percentage=completion_rate(overdue, total),
        average_completion=completion_rate(done_total, total),
        trend=_trend(completion, creation),
    )
