# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.tasks.task_manager import TaskEntityManager
from taskflow.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo, FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the process environment.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        default_page_limit=50,
        max_page_limit=500,
        recover_corrupt_store=False,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def manager(repo: FakeTaskRepo, clock: FixedClock) -> TaskEntityManager:
    """Manager over the in-memory repo with a controllable clock."""
    return TaskEntityManager(repo, clock=clock)


@pytest.fixture()
def file_manager(settings: SimpleNamespace, clock: FixedClock) -> TaskEntityManager:
    """
    Manager over a real JSON file.

    NOTE: the file store is kept real here because the load/save round-trip
    is part of what we want to test.
    """
    return TaskEntityManager(TaskStore(settings.tasks_path), clock=clock)
