# src/todo_panel/storage/panel_repo.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.panel_settings import PanelSettings
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
TODOS_KEY = "todos"
SETTINGS_KEY = "settings"


class PanelRepository:
    """
    JSON file holding the whole panel record.

    Layout (version 1):
        {"version": 1, "settings": {...}, "todos": [...]}

    The record is read wholesale at startup and rewritten wholesale on every
    save (temp file + os.replace). Write failures are logged and reported as
    False; callers keep their in-memory state.

    Migrations:
    - unversioned record (settings keys at top level next to "todos") is
      accepted and rewritten as version 1 on the next save.
    """

    def __init__(self, path: str | Path, *, defaults: PanelSettings | None = None) -> None:
        self._path = Path(path)
        self._defaults = defaults or PanelSettings()
        self._settings = self._defaults
        self._tasks: list[Task] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> PanelSettings:
        return self._settings

    # ---- decoding ----

    def _read_raw(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read panel data from %s; starting empty.", self._path)
            return None
        if not isinstance(data, dict):
            logger.warning("Panel data in %s is not an object; starting empty.", self._path)
            return None
        return data

    def _decode(self, data: dict[str, Any]) -> tuple[PanelSettings, list[Task]]:
        version = data.get("version")
        if version is None:
            logger.info("Panel data migration: unversioned record -> version %s", SCHEMA_VERSION)
            settings_raw: dict[str, Any] | None = {k: v for k, v in data.items() if k != TODOS_KEY}
        else:
            if isinstance(version, int) and version > SCHEMA_VERSION:
                logger.warning(
                    "Panel data version %s is newer than supported %s; reading best-effort.",
                    version,
                    SCHEMA_VERSION,
                )
            raw_settings = data.get(SETTINGS_KEY)
            settings_raw = raw_settings if isinstance(raw_settings, dict) else None

        settings = PanelSettings.from_record(settings_raw, self._defaults)

        tasks: list[Task] = []
        raw_tasks = data.get(TODOS_KEY)
        if isinstance(raw_tasks, list):
            for raw in raw_tasks:
                if not isinstance(raw, dict):
                    continue
                task = Task.from_record(raw)
                if task is not None:
                    tasks.append(task)
        return settings, tasks

    # ---- public API ----

    def load(self) -> tuple[PanelSettings, list[Task]]:
        data = self._read_raw()
        if data is None:
            self._settings, self._tasks = self._defaults, []
        else:
            self._settings, self._tasks = self._decode(data)
        logger.info("Loaded panel data: %d tasks from %s", len(self._tasks), self._path)
        return self._settings, list(self._tasks)

    def reload(self) -> tuple[PanelSettings, list[Task]]:
        return self.load()

    def save_tasks(self, tasks: Iterable[Task]) -> bool:
        self._tasks = list(tasks)
        return self._write()

    def save_settings(self, settings: PanelSettings, tasks: Iterable[Task] | None = None) -> bool:
        """
        Write new settings. Pass the live collection as `tasks`; without it the
        last saved (or loaded) list is written back as-is.
        """
        self._settings = settings
        if tasks is not None:
            self._tasks = list(tasks)
        return self._write()

    def _write(self) -> bool:
        record = {
            "version": SCHEMA_VERSION,
            SETTINGS_KEY: self._settings.to_record(),
            TODOS_KEY: [t.to_record() for t in self._tasks],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(record, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(Exception):
                os.chmod(self._path, 0o600)
            logger.debug("Saved panel data: %d tasks to %s", len(self._tasks), self._path)
            return True
        except Exception:
            logger.exception("Failed to save panel data to %s", self._path)
            return False
