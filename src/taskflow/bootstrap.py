# src/taskflow/bootstrap.py

"""
Composition root.

- loads settings once,
- ensures the local data directory exists,
- wires the JSON store into a TaskEntityManager held on AppState,
- decides what happens when the persisted collection is corrupt.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import get_settings
from .core.results import StorageError
from .core.state import AppState
from .logging_setup import level_from_name, setup_logging
from .tasks.task_manager import TaskEntityManager
from .tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.tasks_path).parent.mkdir(parents=True, exist_ok=True)


def configure_logging(settings=None) -> Path:
    """Install console + file logging using settings.log_level and settings.data_dir."""
    if settings is None:
        settings = get_settings()
    console_level = level_from_name(getattr(settings, "log_level", "INFO"))
    return setup_logging(log_dir=getattr(settings, "data_dir", ".local/taskflow"), console_level=console_level)


def _build_manager(store: TaskStore, settings) -> TaskEntityManager:
    return TaskEntityManager(
        store,
        default_page_limit=settings.default_page_limit,
        max_page_limit=settings.max_page_limit,
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    A corrupt task file raises StorageError unless settings.recover_corrupt_store
    is set, in which case the file is moved aside and the app starts empty.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    store = TaskStore(settings.tasks_path)

    try:
        manager = _build_manager(store, settings)
    except StorageError:
        if not settings.recover_corrupt_store:
            raise
        logger.exception("Task store unreadable; starting with an empty collection")
        store.quarantine()
        manager = _build_manager(store, settings)

    logger.info("Starting %s with %d tasks", settings.app_name, len(manager.get_all()))
    return AppState(settings=settings, task_store=store, manager=manager)
