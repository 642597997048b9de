# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_panel.core.state import AppState, view_from_settings
from todo_panel.storage.panel_repo import PanelRepository
from todo_panel.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo, FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        data_path=tmp_path / "panel.json",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def fake_repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def store(fake_repo: FakeTaskRepo, clock: FixedClock) -> TaskStore:
    return TaskStore(fake_repo, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FixedClock) -> AppState:
    """
    AppState wired with a real JSON repository in tmp_path and a fixed clock.

    The repository is real because what lands on disk is part of what we test.
    """
    repo = PanelRepository(settings.data_path)
    panel_settings, tasks = repo.load()
    store = TaskStore(repo, clock=clock)
    store.load(tasks)
    return AppState(
        settings=settings,
        repo=repo,
        store=store,
        panel_settings=panel_settings,
        view=view_from_settings(panel_settings),
        clock=clock,
    )
