# src/todo_panel/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class TaskValidationError(ValueError):
    """Raised before a mutation is accepted (e.g. empty title)."""


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_raw(cls, raw: str | None, default: Priority | None = None) -> Priority:
        fallback = default if default is not None else cls.MEDIUM
        if not raw:
            return fallback
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return fallback


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


@dataclass(slots=True)
class Task:
    """
    A single todo entry.

    id / created_at / updated_at may be left empty by a caller creating a task;
    the store fills them in.
    """

    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: str | None = None
    is_completed: bool = False
    tags: list[str] = field(default_factory=list)

    id: str = ""
    created_at: str = ""
    updated_at: str = ""

    def to_record(self) -> dict[str, Any]:
        """On-disk representation (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "dueDate": self.due_date,
            "isCompleted": self.is_completed,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task | None:
        """Lenient decode. Returns None for entries that cannot be a task."""
        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            logger.warning("Skipping stored task without title id=%s", raw.get("id"))
            return None

        tags_raw = raw.get("tags")
        tags = [str(t) for t in tags_raw if str(t).strip()] if isinstance(tags_raw, list) else []

        due = raw.get("dueDate")
        due_date = str(due).strip() if due else None

        done = raw.get("isCompleted", False)

        created_at = str(raw.get("createdAt") or "")
        updated_at = str(raw.get("updatedAt") or created_at)

        return cls(
            id=str(raw.get("id") or ""),
            title=title,
            description=str(raw.get("description") or ""),
            priority=Priority.from_raw(raw.get("priority")),
            due_date=due_date or None,
            is_completed=done if isinstance(done, bool) else False,
            tags=tags,
            created_at=created_at,
            updated_at=updated_at,
        )
