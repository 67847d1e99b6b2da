# tests/test_task_validator.py

from __future__ import annotations

from datetime import date, datetime

from taskflow.tasks.task_validator import validate


def test_valid_minimal_and_full_payloads() -> None:
    assert validate({"title": "Fix bug"}).is_valid
    res = validate(
        {
            "title": "Fix bug",
            "description": "details",
            "priority": "critical",
            "dueDate": "2025-08-15T10:00:00Z",
            "completed": True,
        }
    )
    assert res.is_valid
    assert res.errors == ()


def test_title_rules() -> None:
    assert validate({}).errors == ("title required",)
    assert validate({"title": "   "}).errors == ("title required",)
    assert validate({"title": 42}).errors == ("title required",)
    assert validate({"title": "x" * 101}).errors == ("title too long",)
    # Length is measured after trimming.
    assert validate({"title": "  " + "x" * 100 + "  "}).is_valid


def test_description_rules() -> None:
    assert validate({"title": "t", "description": "x" * 500}).is_valid
    assert validate({"title": "t", "description": "x" * 501}).errors == ("description too long",)
    assert validate({"title": "t", "description": ["x"]}).errors == ("invalid description",)
    assert validate({"title": "t", "description": None}).is_valid


def test_due_date_rules() -> None:
    assert validate({"title": "t", "dueDate": None}).is_valid
    assert validate({"title": "t", "dueDate": ""}).is_valid
    assert validate({"title": "t", "dueDate": date(2025, 1, 1)}).is_valid
    assert validate({"title": "t", "dueDate": datetime(2025, 1, 1, 9, 30)}).is_valid
    assert validate({"title": "t", "dueDate": "2025-02-30"}).errors == ("invalid due date",)
    assert validate({"title": "t", "dueDate": "tomorrow"}).errors == ("invalid due date",)
    assert validate({"title": "t", "dueDate": 20250101}).errors == ("invalid due date",)


def test_collects_every_violation_in_order() -> None:
    res = validate(
        {
            "title": "",
            "description": "x" * 600,
            "priority": "urgent",
            "dueDate": "not a date",
            "completed": "yes",
        }
    )
    assert not res.is_valid
    assert res.errors == (
        "title required",
        "description too long",
        "invalid priority",
        "invalid due date",
        "invalid completed flag",
    )


def test_non_mapping_candidate_never_raises() -> None:
    res = validate(None)
    assert not res.is_valid
    assert res.errors == ("title required",)


def test_due_date_out_of_utc_range_is_invalid() -> None:
    assert validate({"title": "t", "dueDate": "9999-12-31T23:00:00-05:00"}).errors == ("invalid due date",)
    assert validate({"title": "t", "dueDate": "0001-01-01T00:00:00+01:00"}).errors == ("invalid due date",)
    assert validate({"title": "t", "dueDate": "9999-12-31T23:00:00"}).is_valid
    assert validate({"title": "t", "dueDate": "9999-12-31"}).is_valid


def test_tag_rules() -> None:
    assert validate({"title": "t", "tags": ["home", "errands"]}).is_valid
    assert validate({"title": "t", "tags": None}).is_valid
    assert validate({"title": "t", "tags": []}).is_valid
    assert validate({"title": "t", "tags": "home"}).errors == ("invalid tags",)
    assert validate({"title": "t", "tags": [f"t{i}" for i in range(11)]}).errors == ("too many tags",)
    assert validate({"title": "t", "tags": ["x" * 51]}).errors == ("invalid tag",)
    assert validate({"title": "t", "tags": ["ok", 3]}).errors == ("invalid tag",)
