# src/todo_panel/tasks/task_view.py

from __future__ import annotations

"""
View projection: what the panel shows, derived from the task collection.

Everything here is a pure function of (tasks, view config, now). Nothing
mutates the collection; callers pass the store's snapshot.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum

from .task_models import Priority, Task

_EPOCH = datetime.min.replace(tzinfo=UTC)
_RELATIVE_WINDOW_DAYS = 7


class FilterSelector(StrEnum):
    ALL = "all"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def from_raw(cls, raw: str | None, default: FilterSelector | None = None) -> FilterSelector:
        fallback = default if default is not None else cls.ALL
        if not raw:
            return fallback
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return fallback


class SortKey(StrEnum):
    CREATED_AT = "createdAt"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"

    @classmethod
    def lookup(cls, raw: str | None) -> SortKey | None:
        """Case-insensitive; "due_date", "due-date" and "duedate" all match dueDate."""
        key = str(raw or "").strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None

    @classmethod
    def from_raw(cls, raw: str | None, default: SortKey | None = None) -> SortKey:
        found = cls.lookup(raw)
        if found is not None:
            return found
        return default if default is not None else cls.CREATED_AT


@dataclass(frozen=True, slots=True)
class ViewConfig:
    search: str = ""
    filter: FilterSelector = FilterSelector.ALL
    sort_by: SortKey = SortKey.CREATED_AT
    show_completed: bool = True


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    pending: int
    completed: int
    high_priority_open: int
    overdue: int


# ---- time helpers ----


def local_now() -> datetime:
    return datetime.now().astimezone()


def _aware(now: datetime | None) -> datetime:
    if now is None:
        return local_now()
    return now if now.tzinfo is not None else now.astimezone()


def parse_timestamp(raw: str | None) -> datetime | None:
    """ISO timestamp -> aware datetime (naive values are taken as UTC)."""
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def parse_due(raw: str | None, now: datetime | None = None) -> datetime | None:
    """
    Due date -> aware datetime.

    A bare date means midnight at the start of that day in `now`'s timezone.
    """
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_aware(now).tzinfo)
    return dt


# ---- filtering ----


def matches_search(task: Task, needle: str) -> bool:
    needle = needle.casefold()
    if needle in task.title.casefold():
        return True
    if task.description and needle in task.description.casefold():
        return True
    return any(needle in tag.casefold() for tag in task.tags)


def filter_tasks(tasks: Iterable[Task], view: ViewConfig) -> list[Task]:
    out = list(tasks)

    # Whitespace-only means no search; otherwise match the text as typed.
    needle = view.search
    if needle.strip():
        out = [t for t in out if matches_search(t, needle)]

    selector = view.filter
    if selector == FilterSelector.COMPLETED:
        out = [t for t in out if t.is_completed]
    elif selector == FilterSelector.PENDING:
        out = [t for t in out if not t.is_completed]
    elif selector in (FilterSelector.HIGH, FilterSelector.MEDIUM, FilterSelector.LOW):
        wanted = Priority(selector.value)
        out = [t for t in out if t.priority == wanted and not t.is_completed]

    # An explicit "completed" selector wins over the global preference.
    if not view.show_completed and selector != FilterSelector.COMPLETED:
        out = [t for t in out if not t.is_completed]

    return out


# ---- sorting ----


def sort_tasks(tasks: Iterable[Task], sort_by: SortKey, now: datetime | None = None) -> list[Task]:
    """Stable sort; equal keys keep collection order."""
    items = list(tasks)

    if sort_by == SortKey.DUE_DATE:
        ref = _aware(now)

        def due_key(t: Task) -> tuple[int, datetime]:
            due = parse_due(t.due_date, ref)
            return (0, due) if due is not None else (1, _EPOCH)

        return sorted(items, key=due_key)

    if sort_by == SortKey.PRIORITY:
        return sorted(items, key=lambda t: t.priority.rank, reverse=True)

    return sorted(items, key=lambda t: parse_timestamp(t.created_at) or _EPOCH, reverse=True)


def project(tasks: Iterable[Task], view: ViewConfig, now: datetime | None = None) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, view), view.sort_by, now)


# ---- stats ----


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.is_completed or not task.due_date:
        return False
    ref = _aware(now)
    due = parse_due(task.due_date, ref)
    return due is not None and due < ref


def compute_stats(tasks: Sequence[Task], now: datetime | None = None) -> TaskStats:
    """Aggregates over the whole collection, independent of any filter."""
    ref = _aware(now)
    total = len(tasks)
    completed = sum(1 for t in tasks if t.is_completed)
    return TaskStats(
        total=total,
        pending=total - completed,
        completed=completed,
        high_priority_open=sum(1 for t in tasks if t.priority == Priority.HIGH and not t.is_completed),
        overdue=sum(1 for t in tasks if is_overdue(t, ref)),
    )


# ---- presentation ----


def relative_date_label(due: str | date | datetime, now: datetime | None = None) -> str:
    """
    today / tomorrow / yesterday, "N days ago" and "in N days" within a week,
    otherwise a short absolute date ("Oct 5", plus the year when it differs).
    """
    ref = _aware(now)
    if isinstance(due, str):
        parsed = parse_due(due, ref)
        if parsed is None:
            return due
        day = parsed.astimezone(ref.tzinfo).date()
    elif isinstance(due, datetime):
        day = (due if due.tzinfo is None else due.astimezone(ref.tzinfo)).date()
    else:
        day = due

    diff = (day - ref.date()).days
    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    if diff == -1:
        return "yesterday"
    if -_RELATIVE_WINDOW_DAYS <= diff < 0:
        return f"{-diff} days ago"
    if 0 < diff <= _RELATIVE_WINDOW_DAYS:
        return f"in {diff} days"

    label = f"{day:%b} {day.day}"
    if day.year != ref.year:
        label += f", {day.year}"
    return label
