# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskflow.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows taskflow records; anything else (py.warnings included) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split(".", 1)[0] == "taskflow":
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route everything to <log_dir>/taskflow.log and a filtered stderr view.

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(min(console_level, file_level))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: list[tuple[logging.Handler, int]] = [
        (logging.StreamHandler(sys.stderr), console_level),
        (logging.FileHandler(log_file, encoding="utf-8"), file_level),
    ]
    for handler, level in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    handlers[0][0].addFilter(_ConsoleNoiseFilter())

    logging.captureWarnings(True)
    return log_file


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Map a level name such as "debug" to its numeric value."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default
