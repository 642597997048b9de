# src/todo_panel/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from .task_models import Priority, Task, TaskValidationError
from .task_store import TaskStore
from .task_view import local_now

logger = logging.getLogger(__name__)

_EDITABLE_KEYS = {
    "title": "title",
    "desc": "description",
    "description": "description",
    "priority": "priority",
    "due": "due_date",
    "tags": "tags",
}
_CLEAR_WORDS = {"", "none", "-", "null"}


@dataclass(slots=True)
class TaskForm:
    """Raw values as typed into a create/edit form."""

    title: str = ""
    description: str = ""
    priority: str = ""
    due_date: str = ""
    tags_raw: str = ""


def parse_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Comma-separated text (or an iterable) -> trimmed non-empty labels, order kept."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [p.strip() for p in parts if p and p.strip()]


def normalize_due(raw: str | None, now: datetime | None = None) -> str | None:
    """
    Accept YYYY-MM-DD (or a full ISO timestamp), "today", "tomorrow".
    Empty -> None. Anything else -> TaskValidationError.
    """
    text = (raw or "").strip()
    if text.lower() in _CLEAR_WORDS:
        return None

    today = (now or local_now()).date()
    word = text.lower()
    if word == "today":
        return today.isoformat()
    if word == "tomorrow":
        return (today + timedelta(days=1)).isoformat()

    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    try:
        datetime.fromisoformat(text)
    except ValueError:
        raise TaskValidationError(f"Invalid due date: {text!r} (use YYYY-MM-DD).") from None
    return text


def parse_priority(raw: str) -> Priority:
    try:
        return Priority(raw.strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in Priority)
        raise TaskValidationError(f"Invalid priority: {raw!r} (use {valid}).") from None


def task_from_form(
    form: TaskForm,
    *,
    existing: Task | None = None,
    default_priority: Priority = Priority.MEDIUM,
    now: datetime | None = None,
) -> Task:
    """
    Build the candidate task a form submits.

    When editing, id / created_at / is_completed are carried over from
    `existing` because the store replaces tasks wholesale.
    """
    priority = parse_priority(form.priority) if form.priority.strip() else default_priority
    candidate = Task(
        title=form.title.strip(),
        description=form.description.strip(),
        priority=priority,
        due_date=normalize_due(form.due_date, now),
        tags=parse_tags(form.tags_raw),
    )
    if existing is not None:
        candidate = replace(
            candidate,
            id=existing.id,
            created_at=existing.created_at,
            updated_at=existing.updated_at,
            is_completed=existing.is_completed,
        )
    return candidate


def form_from_task(task: Task) -> TaskForm:
    return TaskForm(
        title=task.title,
        description=task.description,
        priority=task.priority.value,
        due_date=task.due_date or "",
        tags_raw=", ".join(task.tags),
    )


def submit_form(
    store: TaskStore,
    form: TaskForm,
    *,
    existing: Task | None = None,
    default_priority: Priority = Priority.MEDIUM,
) -> Task | None:
    """Create (no `existing`) or update. Raises TaskValidationError on bad input."""
    candidate = task_from_form(form, existing=existing, default_priority=default_priority)
    if existing is None:
        return store.create(candidate)
    return store.update(candidate)


def parse_quick_add(
    args: Iterable[str],
    *,
    default_priority: Priority = Priority.MEDIUM,
    now: datetime | None = None,
) -> Task:
    """
    One-line add: `Buy milk !high due:2026-10-20 #errand`.

    !low/!medium/!high sets priority, due:<date> the due date, #word a tag;
    everything else is the title.
    """
    title_words: list[str] = []
    tags: list[str] = []
    priority = default_priority
    due: str | None = None

    for token in args:
        low = token.lower()
        if low.startswith("!") and len(token) > 1:
            priority = parse_priority(token[1:])
        elif low.startswith("due:"):
            due = normalize_due(token[4:], now)
        elif token.startswith("#") and len(token) > 1:
            tags.append(token[1:])
        else:
            title_words.append(token)

    return Task(title=" ".join(title_words).strip(), priority=priority, due_date=due, tags=tags)


def parse_edit_pairs(args: Iterable[str]) -> dict[str, str]:
    """`title="New title" due=none` -> {"title": "New title", "due": "none"}."""
    pairs: dict[str, str] = {}
    for token in args:
        key, sep, value = token.partition("=")
        if not sep:
            raise TaskValidationError(f"Expected key=value, got {token!r}.")
        key = key.strip().lower()
        if key not in _EDITABLE_KEYS:
            valid = ", ".join(sorted(_EDITABLE_KEYS))
            raise TaskValidationError(f"Unknown field {key!r} (use {valid}).")
        pairs[key] = value
    return pairs


def apply_edits(task: Task, pairs: dict[str, str], now: datetime | None = None) -> Task:
    """Return a full replacement candidate with the given fields changed."""
    changes: dict[str, object] = {}
    for key, value in pairs.items():
        field_name = _EDITABLE_KEYS[key]
        if field_name == "priority":
            changes[field_name] = parse_priority(value)
        elif field_name == "due_date":
            changes[field_name] = normalize_due(value, now)
        elif field_name == "tags":
            changes[field_name] = parse_tags(value)
        else:
            changes[field_name] = value.strip()
    logger.debug("Edit candidate id=%s fields=%s", task.id, sorted(changes))
    return replace(task, **changes)
