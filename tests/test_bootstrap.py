# tests/test_bootstrap.py

from __future__ import annotations

import logging

import pytest

from taskflow.bootstrap import configure_logging, create_initial_state
from taskflow.config import Settings
from taskflow.core.results import StorageError
from taskflow.logging_setup import _ConsoleNoiseFilter, level_from_name


def test_create_initial_state_wires_a_working_manager(settings) -> None:
    state = create_initial_state(settings=settings)
    assert settings.tasks_path.exists()

    task = state.manager.create({"title": "from bootstrap"}).unwrap()
    reloaded = create_initial_state(settings=settings)
    assert reloaded.manager.get_by_id(task.id) == task


def test_corrupt_store_raises_unless_recovery_enabled(settings) -> None:
    settings.tasks_path.parent.mkdir(parents=True)
    settings.tasks_path.write_text("{broken", "utf-8")

    with pytest.raises(StorageError):
        create_initial_state(settings=settings)

    settings.recover_corrupt_store = True
    state = create_initial_state(settings=settings)
    assert state.manager.get_all() == []
    assert settings.tasks_path.with_suffix(".json.corrupt").read_text("utf-8") == "{broken"


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKFLOW_DEFAULT_PAGE_LIMIT", "900")
    monkeypatch.setenv("TASKFLOW_MAX_PAGE_LIMIT", "100")
    monkeypatch.setenv("TASKFLOW_RECOVER_CORRUPT_STORE", "yes")
    monkeypatch.delenv("TASKFLOW_TASKS_PATH", raising=False)

    s = Settings.from_env()
    assert s.tasks_path == tmp_path / "tasks.json"
    assert (s.default_page_limit, s.max_page_limit) == (100, 100)
    assert s.recover_corrupt_store is True


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    # Only drop what setup_logging installed; pytest manages its own capture handlers.
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler) or any(isinstance(f, _ConsoleNoiseFilter) for f in h.filters):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    logging.captureWarnings(False)


def test_configure_logging_writes_taskflow_log(settings, restore_root_logging) -> None:
    log_file = configure_logging(settings)
    logging.getLogger("taskflow.tasks.task_manager").debug("hello from test")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == settings.data_dir / "taskflow.log"
    assert "hello from test" in log_file.read_text("utf-8")


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("nonsense") == logging.INFO


def test_console_filter_keeps_app_records_and_hides_library_chatter() -> None:
    def record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    console_filter = _ConsoleNoiseFilter()
    assert console_filter.filter(record("taskflow.tasks.task_store", logging.DEBUG))
    assert not console_filter.filter(record("taskflowish", logging.INFO))
    assert not console_filter.filter(record("py.warnings", logging.WARNING))
    assert console_filter.filter(record("urllib3", logging.ERROR))
