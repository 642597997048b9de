# src/todo_panel/core/state.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskStats, ViewConfig, compute_stats, local_now, project
from .panel_settings import PanelSettings
from .ports import PanelRepo

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]
# (label, current value) -> typed value
Prompt = Callable[[str, str], str]


def _deny(_message: str) -> bool:
    return False


@dataclass
class AppState:
    # Env settings (config.Settings or a test stand-in).
    settings: Any

    repo: PanelRepo
    store: TaskStore
    panel_settings: PanelSettings
    view: ViewConfig

    # Ids in the order of the last render; "/done 2" refers to visible_ids[1].
    visible_ids: list[str] = field(default_factory=list)

    confirm: Confirm = _deny
    prompt: Prompt | None = None
    clock: Callable[[], datetime] = local_now


def view_from_settings(panel_settings: PanelSettings, search: str = "") -> ViewConfig:
    return ViewConfig(
        search=search,
        filter=panel_settings.default_filter,
        sort_by=panel_settings.sort_by,
        show_completed=panel_settings.show_completed,
    )


def visible_tasks(state: AppState) -> list[Task]:
    return project(state.store.tasks, state.view, state.clock())


def current_stats(state: AppState) -> TaskStats:
    return compute_stats(state.store.tasks, state.clock())


def update_panel_settings(state: AppState, **changes: Any) -> bool:
    """
    Change persisted preferences and save the whole record, tasks taken from
    the store so the file matches what is in memory.

    The live view follows show_completed / sort_by; search and the current
    filter selection are left alone.
    """
    new_settings = replace(state.panel_settings, **changes)
    state.panel_settings = new_settings
    state.view = replace(
        state.view,
        show_completed=new_settings.show_completed,
        sort_by=new_settings.sort_by,
    )
    ok = state.repo.save_settings(new_settings, state.store.tasks)
    logger.debug("Panel settings updated %s saved=%s", sorted(changes), ok)
    return ok


def reload_state(state: AppState) -> int:
    """Re-read the record from disk, replacing settings and tasks in memory."""
    panel_settings, tasks = state.repo.reload()
    state.panel_settings = panel_settings
    state.store.load(tasks)
    state.view = view_from_settings(panel_settings, search=state.view.search)
    state.visible_ids = []
    logger.info("Reloaded panel state: %d tasks", len(state.store))
    return len(state.store)
