"""TaskFlow: task-tracking core (validation, CRUD, queries, statistics, JSON persistence)."""

__version__ = "0.1.0"
