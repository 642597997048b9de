# src/todo_panel/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and the front ends depend on Protocols instead of concrete
implementations, so storage and panels stay swappable and easy to fake in tests.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .panel_settings import PanelSettings


class TaskPersistence(Protocol):
    """What the task store needs: one full-collection write per mutation."""

    def save_tasks(self, tasks: list[Task]) -> bool: ...


class PanelRepo(TaskPersistence, Protocol):
    """Whole-record storage: settings + task collection."""

    @property
    def path(self) -> Path: ...

    def load(self) -> tuple[PanelSettings, list[Task]]: ...
    def reload(self) -> tuple[PanelSettings, list[Task]]: ...
    def save_settings(self, settings: PanelSettings, tasks: Iterable[Task] | None = None) -> bool: ...


class Panel(Protocol):
    """
    Front-end capability interface.

    handle_event returns False when the panel wants to close.
    """

    def render(self) -> None: ...
    def dispose(self) -> None: ...
    def handle_event(self, event: str) -> bool: ...
