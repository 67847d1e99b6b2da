# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every field has a default.
- Components take settings by injection; get_settings() is only for the composition root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    tasks_path: Path

    # ---- Queries ----
    default_page_limit: int
    max_page_limit: int

    # ---- Storage recovery ----
    recover_corrupt_store: bool

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "taskflow")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")

        max_page_limit = max(1, _env_int(_k("MAX_PAGE_LIMIT"), 500))
        default_page_limit = min(max(1, _env_int(_k("DEFAULT_PAGE_LIMIT"), 50)), max_page_limit)

        # Off by default: a corrupt file is surfaced instead of being replaced.
        recover_corrupt_store = _env_bool(_k("RECOVER_CORRUPT_STORE"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            default_page_limit=default_page_limit,
            max_page_limit=max_page_limit,
            recover_corrupt_store=recover_corrupt_store,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
