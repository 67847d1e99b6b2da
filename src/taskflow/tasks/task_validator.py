# src/taskflow/tasks/task_validator.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .task_models import DESCRIPTION_MAX_LEN, MAX_TAGS, TAG_MAX_LEN, TITLE_MAX_LEN, Priority, parse_due

ERR_TITLE_REQUIRED = "title required"
ERR_TITLE_TOO_LONG = "title too long"
ERR_DESCRIPTION_INVALID = "invalid description"
ERR_DESCRIPTION_TOO_LONG = "description too long"
ERR_PRIORITY_INVALID = "invalid priority"
ERR_DUE_DATE_INVALID = "invalid due date"
ERR_COMPLETED_INVALID = "invalid completed flag"
ERR_TAGS_INVALID = "invalid tags"
ERR_TAGS_TOO_MANY = "too many tags"
ERR_TAG_INVALID = "invalid tag"


@dataclass(slots=True, frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...]


def _check_title(candidate: Mapping[str, Any]) -> list[str]:
    title = candidate.get("title")
    if not isinstance(title, str) or not title.strip():
        return [ERR_TITLE_REQUIRED]
    if len(title.strip()) > TITLE_MAX_LEN:
        return [ERR_TITLE_TOO_LONG]
    return []


def _check_description(candidate: Mapping[str, Any]) -> list[str]:
    description = candidate.get("description")
    if description is None:
        return []
    if not isinstance(description, str):
        return [ERR_DESCRIPTION_INVALID]
    if len(description.strip()) > DESCRIPTION_MAX_LEN:
        return [ERR_DESCRIPTION_TOO_LONG]
    return []


def _check_priority(candidate: Mapping[str, Any]) -> list[str]:
    if "priority" not in candidate or candidate["priority"] is None:
        return []
    if Priority.parse(candidate["priority"]) is None:
        return [ERR_PRIORITY_INVALID]
    return []


def _check_due_date(candidate: Mapping[str, Any]) -> list[str]:
    try:
        parse_due(candidate.get("dueDate"))
    except (TypeError, ValueError):
        return [ERR_DUE_DATE_INVALID]
    return []


def _check_completed(candidate: Mapping[str, Any]) -> list[str]:
    if "completed" not in candidate or isinstance(candidate["completed"], bool):
        return []
    return [ERR_COMPLETED_INVALID]


def _check_tags(candidate: Mapping[str, Any]) -> list[str]:
    tags = candidate.get("tags")
    if tags is None:
        return []
    if not isinstance(tags, list | tuple):
        return [ERR_TAGS_INVALID]
    if len(tags) > MAX_TAGS:
        return [ERR_TAGS_TOO_MANY]
    if any(not isinstance(tag, str) or len(tag.strip()) > TAG_MAX_LEN for tag in tags):
        return [ERR_TAG_INVALID]
    return []


_RULES = (
    _check_title,
    _check_description,
    _check_priority,
    _check_due_date,
    _check_completed,
    _check_tags,
)


def validate(candidate: Any) -> ValidationResult:
    """
    Check a create/update candidate against field constraints.

    Every rule runs, so the caller gets all violations at once.
    Never raises.
    """
    if not isinstance(candidate, Mapping):
        return ValidationResult(is_valid=False, errors=(ERR_TITLE_REQUIRED,))

    errors: list[str] = []
    for rule in _RULES:
        errors.extend(rule(candidate))
    return ValidationResult(is_valid=not errors, errors=tuple(errors))
