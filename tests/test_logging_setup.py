# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_panel.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_console_filter_keeps_app_logs() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("todo_panel.cli.commands", logging.DEBUG))
    assert f.filter(_record("todo_panel.connectors.console_panel", logging.INFO))


def test_console_filter_quiets_storage_bookkeeping() -> None:
    f = _ConsoleNoiseFilter()

    assert not f.filter(_record("todo_panel.storage.panel_repo", logging.INFO))
    assert not f.filter(_record("todo_panel.tasks.task_store", logging.DEBUG))
    assert f.filter(_record("todo_panel.storage.panel_repo", logging.WARNING))


def test_console_filter_third_party_needs_error() -> None:
    f = _ConsoleNoiseFilter()

    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("urllib3", logging.INFO))
    assert f.filter(_record("urllib3", logging.ERROR))


@pytest.mark.usefixtures("restore_root_logging")
def test_setup_logging_writes_debug_to_file(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("todo_panel.storage.panel_repo").debug("saved 3 tasks")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    assert "saved 3 tasks" in log_file.read_text("utf-8")
    assert len(logging.getLogger().handlers) == 2
