# src/taskflow/tasks/task_manager.py

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any

from ..core.ports import Clock, TaskRepo
from ..core.results import Result, StorageError
from . import task_query, task_stats
from .task_models import Priority, Task, normalize_due, normalize_tags, utc_now
from .task_validator import validate

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "priority", "dueDate", "completed", "tags")
EXPORT_VERSION = "1.0"


@dataclass(slots=True, frozen=True)
class BulkOutcome:
    operation: str
    tasks: tuple[Task, ...]

    @property
    def count(self) -> int:
        return len(self.tasks)


@dataclass(slots=True, frozen=True)
class ImportSummary:
    imported: int
    total: int


class TaskEntityManager:
    """
    Owner of the authoritative task collection.

    The collection is loaded once at construction and mirrored to the store
    after every mutation. Each mutation holds the manager lock for the whole
    read-modify-persist cycle, builds the new collection as a copy, saves it,
    and only then swaps it in. A failed save therefore leaves memory at the
    last persisted snapshot.

    Raises StorageError from the constructor if the store cannot be loaded;
    every other operation reports failures through Result.
    """

    def __init__(
        self,
        store: TaskRepo,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
        default_page_limit: int | None = task_query.DEFAULT_PAGE_LIMIT,
        max_page_limit: int | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or utc_now
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
        self._default_page_limit = default_page_limit
        self._max_page_limit = max_page_limit
        self._lock = threading.RLock()
        self._tasks: list[Task] = list(store.load())
        logger.info("TaskEntityManager ready tasks=%d", len(self._tasks))

    # ---- internals ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _stamp(self, previous: datetime | None = None) -> datetime:
        # updated_at must move forward even if the clock does not.
        now = self._clock()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _fresh_id(self, taken: set[str] | None = None) -> str:
        if taken is None:
            taken = {t.id for t in self._tasks}
        while True:
            candidate = self._new_id()
            if candidate not in taken:
                return candidate

    @staticmethod
    def _materialize(
        payload: Mapping[str, Any],
        *,
        task_id: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> Task:
        """Build a Task from an already validated payload, applying defaults."""
        return Task(
            id=task_id,
            title=payload["title"].strip(),
            description=(payload.get("description") or "").strip(),
            priority=Priority.parse(payload.get("priority")) or Priority.MEDIUM,
            completed=bool(payload.get("completed", False)),
            due_date=normalize_due(payload.get("dueDate")),
            tags=normalize_tags(payload.get("tags")),
            created_at=created_at,
            updated_at=updated_at,
        )

    def _commit(self, new_tasks: list[Task], action: str) -> Result[Any] | None:
        """Persist then swap. Returns a failure Result, or None on success."""
        try:
            self._store.save(new_tasks)
        except StorageError as e:
            logger.exception("Persisting %s failed; in-memory state unchanged", action)
            return Result.storage_failure(str(e))
        self._tasks = new_tasks
        return None

    # ---- reads ----

    def get_by_id(self, task_id: str) -> Task | None:
        with self._lock:
            idx = self._index_of(task_id)
            return None if idx is None else self._tasks[idx]

    def get_all(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def query(self, params: Mapping[str, Any] | task_query.TaskQuery | None = None) -> Result[task_query.QueryPage]:
        """Filter, sort and paginate a snapshot; params use the wire names (sortBy, offset, ...)."""
        if isinstance(params, task_query.TaskQuery):
            query = params
        else:
            parsed = task_query.parse_query(
                params or {},
                default_limit=self._default_page_limit,
                max_limit=self._max_page_limit,
            )
            if not parsed.ok:
                return Result.invalid(parsed.errors)
            query = parsed.unwrap()
        return Result.success(task_query.run_query(self.get_all(), query))

    def stats(self, today: date | None = None) -> task_stats.TaskStats:
        return task_stats.summarize(self.get_all(), today=today)

    def productivity(self, now: datetime | None = None) -> task_stats.ProductivityStats:
        return task_stats.productivity_stats(self.get_all(), now=now or self._clock())

    # ---- mutations ----

    def create(self, payload: Mapping[str, Any]) -> Result[Task]:
        check = validate(payload)
        if not check.is_valid:
            logger.debug("create rejected: %s", check.errors)
            return Result.invalid(check.errors)

        with self._lock:
            now = self._stamp()
            task = self._materialize(payload, task_id=self._fresh_id(), created_at=now, updated_at=now)
            failure = self._commit([*self._tasks, task], "create")
            if failure is not None:
                return failure

        logger.info("Task created id=%s priority=%s due=%s", task.id, task.priority.value, task.due_date)
        return Result.success(task)

    def update(self, task_id: str, patch: Mapping[str, Any]) -> Result[Task]:
        if not isinstance(patch, Mapping):
            return Result.invalid(["invalid patch"])

        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                return Result.not_found(task_id)

            current = self._tasks[idx]
            changes = {k: patch[k] for k in EDITABLE_FIELDS if k in patch}
            # A null priority in a patch keeps the current level.
            if "priority" in changes and changes["priority"] is None:
                del changes["priority"]
            candidate = {**current.to_payload(), **changes}
            check = validate(candidate)
            if not check.is_valid:
                logger.debug("update rejected id=%s: %s", task_id, check.errors)
                return Result.invalid(check.errors)

            updated = self._materialize(
                candidate,
                task_id=current.id,
                created_at=current.created_at,
                updated_at=self._stamp(current.updated_at),
            )
            new_tasks = list(self._tasks)
            new_tasks[idx] = updated
            failure = self._commit(new_tasks, "update")
            if failure is not None:
                return failure

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return Result.success(updated)

    def toggle_completion(self, task_id: str) -> Result[Task]:
        with self._lock:
            current = self.get_by_id(task_id)
            if current is None:
                return Result.not_found(task_id)
            return self.update(task_id, {"completed": not current.completed})

    def delete(self, task_id: str) -> Result[Task]:
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                return Result.not_found(task_id)

            removed = self._tasks[idx]
            failure = self._commit(self._tasks[:idx] + self._tasks[idx + 1 :], "delete")
            if failure is not None:
                return failure

        logger.info("Task deleted id=%s", task_id)
        return Result.success(removed)

    # ---- bulk ----

    def bulk_complete(self, task_ids: Iterable[str]) -> Result[BulkOutcome]:
        """Mark every known id completed in one save; unknown ids are skipped."""
        if isinstance(task_ids, str) or not isinstance(task_ids, Iterable):
            return Result.invalid(["invalid task id list"])
        wanted = set(task_ids)

        with self._lock:
            new_tasks = list(self._tasks)
            touched: list[Task] = []
            for i, t in enumerate(new_tasks):
                if t.id in wanted:
                    new_tasks[i] = replace(t, completed=True, updated_at=self._stamp(t.updated_at))
                    touched.append(new_tasks[i])

            if touched:
                failure = self._commit(new_tasks, "bulk complete")
                if failure is not None:
                    return failure

        logger.info("Bulk complete: %d of %d ids matched", len(touched), len(wanted))
        return Result.success(BulkOutcome(operation="complete", tasks=tuple(touched)))

    def bulk_delete(self, task_ids: Iterable[str]) -> Result[BulkOutcome]:
        """Remove every known id in one save; unknown ids are skipped."""
        if isinstance(task_ids, str) or not isinstance(task_ids, Iterable):
            return Result.invalid(["invalid task id list"])
        wanted = set(task_ids)

        with self._lock:
            kept = [t for t in self._tasks if t.id not in wanted]
            removed = [t for t in self._tasks if t.id in wanted]

            if removed:
                failure = self._commit(kept, "bulk delete")
                if failure is not None:
                    return failure

        logger.info("Bulk delete: %d of %d ids matched", len(removed), len(wanted))
        return Result.success(BulkOutcome(operation="delete", tasks=tuple(removed)))

    # ---- export / import ----

    def export_tasks(self) -> dict[str, Any]:
        tasks = self.get_all()
        return {
            "exportDate": self._clock().isoformat(),
            "version": EXPORT_VERSION,
            "taskCount": len(tasks),
            "tasks": [t.to_dict() for t in tasks],
        }

    def import_tasks(self, data: Any) -> Result[ImportSummary]:
        """
        Append the records of an export document.

        Each record is validated and gets a fresh id and fresh timestamps.
        One invalid record rejects the whole import.
        """
        if not isinstance(data, Mapping) or not isinstance(data.get("tasks"), list):
            return Result.invalid(["invalid import document"])

        records: list[Mapping[str, Any]] = []
        errors: list[str] = []
        for i, raw in enumerate(data["tasks"]):
            if not isinstance(raw, Mapping):
                errors.append(f"tasks[{i}]: invalid record")
                continue
            payload = {k: raw[k] for k in EDITABLE_FIELDS if k in raw}
            check = validate(payload)
            if not check.is_valid:
                errors.extend(f"tasks[{i}]: {msg}" for msg in check.errors)
                continue
            records.append(payload)

        if errors:
            return Result.invalid(errors)

        with self._lock:
            new_tasks = list(self._tasks)
            taken = {t.id for t in new_tasks}
            for payload in records:
                now = self._stamp()
                task_id = self._fresh_id(taken)
                taken.add(task_id)
                new_tasks.append(self._materialize(payload, task_id=task_id, created_at=now, updated_at=now))

            if records:
                failure = self._commit(new_tasks, "import")
                if failure is not None:
                    return failure
            total = len(self._tasks)

        logger.info("Imported %d tasks (total=%d)", len(records), total)
        return Result.success(ImportSummary(imported=len(records), total=total))
