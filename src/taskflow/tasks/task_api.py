# src/taskflow/tasks/task_api.py

from __future__ import annotations

"""
Async facade over TaskEntityManager.

For hosts that serve many I/O-bound requests from one event loop:
- mutations are serialized by an asyncio.Lock,
- the blocking manager call (which persists to disk) runs in a worker thread,
- a coroutine only returns after the save has completed.

Reads are cheap in-memory snapshots and are not offloaded.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any, TypeVar

from ..core.results import Result
from .task_manager import BulkOutcome, ImportSummary, TaskEntityManager
from .task_models import Task
from .task_query import QueryPage, TaskQuery
from .task_stats import ProductivityStats, TaskStats

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncTaskManager:
    def __init__(self, manager: TaskEntityManager) -> None:
        self._manager = manager
        self._lock = asyncio.Lock()

    async def _mutate(self, fn: Callable[..., Result[T]], *args: Any) -> Result[T]:
        async with self._lock:
            logger.debug("async %s", fn.__name__)
            return await asyncio.to_thread(fn, *args)

    # ---- mutations ----

    async def create(self, payload: Mapping[str, Any]) -> Result[Task]:
        return await self._mutate(self._manager.create, payload)

    async def update(self, task_id: str, patch: Mapping[str, Any]) -> Result[Task]:
        return await self._mutate(self._manager.update, task_id, patch)

    async def delete(self, task_id: str) -> Result[Task]:
        return await self._mutate(self._manager.delete, task_id)

    async def toggle_completion(self, task_id: str) -> Result[Task]:
        return await self._mutate(self._manager.toggle_completion, task_id)

    async def bulk_complete(self, task_ids: Iterable[str]) -> Result[BulkOutcome]:
        return await self._mutate(self._manager.bulk_complete, list(task_ids))

    async def bulk_delete(self, task_ids: Iterable[str]) -> Result[BulkOutcome]:
        return await self._mutate(self._manager.bulk_delete, list(task_ids))

    async def import_tasks(self, data: Any) -> Result[ImportSummary]:
        return await self._mutate(self._manager.import_tasks, data)

    # ---- reads ----

    def get_by_id(self, task_id: str) -> Task | None:
        return self._manager.get_by_id(task_id)

    def get_all(self) -> list[Task]:
        return self._manager.get_all()

    def query(self, params: Mapping[str, Any] | TaskQuery | None = None) -> Result[QueryPage]:
        return self._manager.query(params)

    def stats(self, today: date | None = None) -> TaskStats:
        return self._manager.stats(today)

    def productivity(self, now: datetime | None = None) -> ProductivityStats:
        return self._manager.productivity(now)

    def export_tasks(self) -> dict[str, Any]:
        return self._manager.export_tasks()
