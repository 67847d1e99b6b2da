# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_manager import TaskEntityManager
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (Settings or any object with the same attributes).
    settings: Any

    task_store: TaskStore
    manager: TaskEntityManager
