# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path

from todo_panel.core.panel_settings import PanelSettings
from todo_panel.tasks.task_models import Task

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class FixedClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class FakeTaskRepo:
    """
    In-memory PanelRepo.

    Records every write so tests can assert "exactly one persistence write".
    Set ok=False to simulate a failing disk.
    """

    def __init__(self, *, ok: bool = True, settings: PanelSettings | None = None) -> None:
        self.ok = ok
        self.settings = settings or PanelSettings()
        self.saves: list[list[Task]] = []
        self.settings_saves: list[PanelSettings] = []
        self.path = Path("memory://panel.json")

    def save_tasks(self, tasks: Iterable[Task]) -> bool:
        self.saves.append(list(tasks))
        return self.ok

    def save_settings(self, settings: PanelSettings, tasks: Iterable[Task] | None = None) -> bool:
        self.settings = settings
        self.settings_saves.append(settings)
        if tasks is not None:
            self.saves.append(list(tasks))
        return self.ok

    def load(self) -> tuple[PanelSettings, list[Task]]:
        return self.settings, list(self.saves[-1]) if self.saves else []

    def reload(self) -> tuple[PanelSettings, list[Task]]:
        return self.load()


class ScriptedIO:
    """Feeds console input line by line and captures output; EOF when exhausted."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)
        self.prompts: list[str] = []
        self.output: list[str] = []

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)

    def write(self, text: str) -> None:
        self.output.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.output)
