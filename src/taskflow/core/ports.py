# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The manager depends on Protocols instead of concrete implementations,
so the JSON store can be swapped for an in-memory fake in tests.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, Protocol

Clock = Callable[[], datetime]
# Must return timezone-aware UTC datetimes.


class TaskRepo(Protocol):
    """Whole-collection persistence: full replace on every save, no deltas."""

    def load(self) -> list[Any]: ...

    def save(self, tasks: Sequence[Any]) -> None: ...
