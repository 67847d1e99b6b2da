# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from taskflow.core.results import StorageError
from taskflow.tasks.task_models import Task


class FixedClock:
    """
    Deterministic clock for unit tests.

    Returns the same instant until advanced, so tests can check that the
    manager still moves updated_at forward.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 8, 9, 10, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeTaskRepo:
    """
    In-memory TaskRepo.

    - Captures every saved snapshot for assertions
    - Can be told to fail the next saves (StorageError), to test rollback
    """

    def __init__(self, tasks: Sequence[Task] = ()) -> None:
        self.tasks: list[Task] = list(tasks)
        self.saves: list[list[Task]] = []
        self.fail_saves = False
        self.fail_load = False

    def load(self) -> list[Task]:
        if self.fail_load:
            raise StorageError("corrupt task file: fake")
        return list(self.tasks)

    def save(self, tasks: Sequence[Task]) -> None:
        if self.fail_saves:
            raise StorageError("failed to write task file: fake disk full")
        self.tasks = list(tasks)
        self.saves.append(list(tasks))
