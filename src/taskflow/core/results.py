# src/taskflow/core/results.py

"""
Typed outcomes for core operations.

Expected conditions (bad input, unknown id, a storage failure during a
mutation) are returned as a Result instead of being raised. StorageError is
the only exception type the core raises itself, and only from the store and
the manager constructor.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class StorageError(Exception):
    """The persisted task collection could not be read or written."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: ErrorKind | None = None
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def invalid(cls, errors: Iterable[str]) -> Result[T]:
        return cls(error=ErrorKind.VALIDATION, errors=tuple(errors))

    @classmethod
    def not_found(cls, task_id: str) -> Result[T]:
        return cls(error=ErrorKind.NOT_FOUND, errors=(f"task not found: {task_id}",))

    @classmethod
    def storage_failure(cls, message: str) -> Result[T]:
        return cls(error=ErrorKind.STORAGE, errors=(message,))

    def unwrap(self) -> T:
        """Return the value or raise ValueError carrying the failure messages."""
        if self.error is not None:
            raise ValueError(f"{self.error.value}: {'; '.join(self.errors)}")
        return self.value  # type: ignore[return-value]
