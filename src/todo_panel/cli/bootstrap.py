# src/todo_panel/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- reads the stored record and wires repository, task store and view into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState, view_from_settings
from ..storage.panel_repo import PanelRepository
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.data_path.parent.mkdir(parents=True, exist_ok=True)


def _panel_defaults(settings):
    make = getattr(settings, "panel_defaults", None)
    return make() if callable(make) else None


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repo = PanelRepository(settings.data_path, defaults=_panel_defaults(settings))
    panel_settings, tasks = repo.load()

    store = TaskStore(repo)
    store.load(tasks)

    state = AppState(
        settings=settings,
        repo=repo,
        store=store,
        panel_settings=panel_settings,
        view=view_from_settings(panel_settings),
    )
    logger.info("State ready: %d tasks, sort=%s", len(store), panel_settings.sort_by)
    return state
