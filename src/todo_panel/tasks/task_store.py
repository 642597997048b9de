# src/todo_panel/tasks/task_store.py

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime

from ..core.ports import TaskPersistence
from .task_models import Task, TaskValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LEN = 9


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _base36(n: int) -> str:
    if n <= 0:
        return "0"
    out: list[str] = []
    while n:
        n, r = divmod(n, 36)
        out.append(_ID_ALPHABET[r])
    return "".join(reversed(out))


def new_task_id(now: datetime) -> str:
    """Millisecond timestamp (base36) + random base36 suffix."""
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LEN))
    return f"{_base36(millis)}{suffix}"


class TaskStore:
    """
    In-memory owner of the task collection.

    Every accepted mutation rewrites the whole collection through the
    injected persistence port. The in-memory list is authoritative; a failed
    write is logged by the port and only reflected in `last_save_ok`.

    Lookups are linear: the collection is a personal todo list.
    """

    def __init__(self, repo: TaskPersistence, *, clock: Clock | None = None) -> None:
        self._repo = repo
        self._clock: Clock = clock or _utc_now
        self._tasks: list[Task] = []
        self.last_save_ok = True

    # ---- low-level helpers ----

    def _now_iso(self) -> tuple[datetime, str]:
        now = self._clock()
        return now, now.isoformat()

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _fresh_id(self, now: datetime) -> str:
        existing = {t.id for t in self._tasks}
        while True:
            tid = new_task_id(now)
            if tid not in existing:
                return tid

    @staticmethod
    def _validate(task: Task) -> None:
        if not task.title or not task.title.strip():
            raise TaskValidationError("Title must not be empty.")

    def _persist(self) -> bool:
        ok = bool(self._repo.save_tasks(list(self._tasks)))
        self.last_save_ok = ok
        if not ok:
            logger.warning("Task collection not persisted; memory is ahead of disk (n=%d)", len(self._tasks))
        return ok

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the collection with persisted data (no write)."""
        seen: set[str] = set()
        loaded: list[Task] = []
        now, now_iso = self._now_iso()
        for t in tasks:
            if not t.id:
                t = replace(t, id=new_task_id(now))
            if t.id in seen:
                logger.warning("Dropping stored task with duplicate id=%s", t.id)
                continue
            if not t.created_at:
                t = replace(t, created_at=t.updated_at or now_iso)
            if not t.updated_at:
                t = replace(t, updated_at=t.created_at)
            seen.add(t.id)
            loaded.append(t)
        self._tasks = loaded
        logger.info("TaskStore loaded total=%d", len(loaded))

    # ---- mutations ----

    def create(self, task: Task) -> Task:
        self._validate(task)

        now, now_iso = self._now_iso()
        tid = task.id
        if not tid or self._index_of(tid) is not None:
            tid = self._fresh_id(now)

        created = replace(task, id=tid, tags=list(task.tags), created_at=now_iso, updated_at=now_iso)
        self._tasks.append(created)
        logger.debug("Task created id=%s priority=%s due=%s", tid, created.priority, created.due_date)
        self._persist()
        return created

    def update(self, task: Task) -> Task | None:
        """
        Full replacement of the task with the same id.

        Nothing is merged: the caller echoes back every field it wants to
        keep, created_at included. Unknown id -> silent no-op (None).
        """
        idx = self._index_of(task.id)
        if idx is None:
            logger.debug("Update skipped, no task id=%s", task.id)
            return None

        self._validate(task)
        if not task.created_at:
            raise TaskValidationError("created_at must be carried over on update.")

        now, now_iso = self._now_iso()
        created_at = _clamp_created(task.created_at, now)
        updated = replace(task, tags=list(task.tags), created_at=created_at, updated_at=now_iso)
        self._tasks[idx] = updated
        logger.debug("Task updated id=%s", task.id)
        self._persist()
        return updated

    def delete(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        self._persist()
        return removed

    def toggle_completion(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("Toggle skipped, no task id=%s", task_id)
            return None

        _, now_iso = self._now_iso()
        current = self._tasks[idx]
        toggled = replace(current, is_completed=not current.is_completed, updated_at=now_iso)
        self._tasks[idx] = toggled
        logger.debug("Task toggled id=%s completed=%s", task_id, toggled.is_completed)
        self._persist()
        return toggled


def _clamp_created(created_at: str, now: datetime) -> str:
    """Keep created_at <= updated_at when the caller echoes a timestamp from the future."""
    try:
        created = datetime.fromisoformat(created_at)
    except ValueError:
        return created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=UTC)
    if created > now:
        return now.isoformat()
    return created_at
