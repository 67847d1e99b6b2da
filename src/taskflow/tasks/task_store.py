# src/taskflow/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from ..core.results import StorageError
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    JSON file task store.

    The whole collection lives in one document (a JSON array of task records):
    - load() reads and decodes all of it
    - save() replaces all of it (temp file + os.replace, so readers never see a partial write)

    The store applies no business rules and never reorders records.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        logger.info("TaskStore ready path=%s exists=%s", self._path, self._path.exists())

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    @staticmethod
    def _encode(tasks: Sequence[Task]) -> str:
        return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2) + "\n"

    def _decode(self, raw: str) -> list[Task]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"corrupt task file: {e}", path=self._path) from e

        if not isinstance(data, list):
            raise StorageError("corrupt task file: expected a JSON array", path=self._path)

        tasks: list[Task] = []
        seen: set[str] = set()
        for i, item in enumerate(data):
            try:
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                raise StorageError(f"corrupt task record at index {i}: {e!r}", path=self._path) from e
            if task.id in seen:
                raise StorageError(f"duplicate task id {task.id!r} at index {i}", path=self._path)
            seen.add(task.id)
            tasks.append(task)
        return tasks

    # ---- public API ----

    def load(self) -> list[Task]:
        if not self._path.exists():
            logger.info("Task file %s missing; initializing empty collection", self._path)
            self.save([])
            return []

        try:
            raw = self._path.read_text("utf-8")
        except OSError as e:
            raise StorageError(f"failed to read task file: {e}", path=self._path) from e

        tasks = self._decode(raw)
        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        payload = self._encode(tasks)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageError(f"failed to write task file: {e}", path=self._path) from e
        logger.debug("Saved %d tasks to %s", len(tasks), self._path)

    def quarantine(self) -> Path | None:
        """
        Move an unreadable task file aside as <name>.corrupt.

        Returns the new location, or None when there was nothing to move.
        """
        if not self._path.exists():
            return None
        target = self._path.with_suffix(self._path.suffix + ".corrupt")
        try:
            os.replace(self._path, target)
        except OSError as e:
            raise StorageError(f"failed to quarantine task file: {e}", path=self._path) from e
        logger.warning("Quarantined task file %s -> %s", self._path, target)
        return target
