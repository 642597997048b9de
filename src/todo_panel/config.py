# src/todo_panel/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, passed explicitly to the composition root.
- Nothing required at import time; every value has a default.
- Panel preferences here only seed the stored record on first run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TypeVar

from .core.panel_settings import PanelSettings
from .tasks.task_models import Priority
from .tasks.task_view import FilterSelector, SortKey

ENV_PREFIX = "TODO_PANEL"

E = TypeVar("E", bound=StrEnum)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, parse: type[E], default: E) -> E:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return parse.from_raw(raw, default)  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    data_path: Path

    # ---- First-run panel defaults ----
    show_completed: bool
    sort_by: SortKey
    default_priority: Priority
    default_filter: FilterSelector

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-panel") or "todo-panel"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo_panel"))
        data_path = _env_path(_k("DATA_PATH"), data_dir / "panel.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            data_path=data_path,
            show_completed=_env_bool(_k("SHOW_COMPLETED"), True),
            sort_by=_env_choice(_k("SORT_BY"), SortKey, SortKey.CREATED_AT),
            default_priority=_env_choice(_k("DEFAULT_PRIORITY"), Priority, Priority.MEDIUM),
            default_filter=_env_choice(_k("DEFAULT_FILTER"), FilterSelector, FilterSelector.ALL),
        )

    def panel_defaults(self) -> PanelSettings:
        return PanelSettings(
            show_completed=self.show_completed,
            sort_by=self.sort_by,
            default_priority=self.default_priority,
            default_filter=self.default_filter,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
