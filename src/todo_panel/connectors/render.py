# src/todo_panel/connectors/render.py

"""Plain-text rendering shared by the console panel and slash commands."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..tasks.task_models import Priority, Task
from ..tasks.task_view import TaskStats, ViewConfig, is_overdue, relative_date_label

PRIORITY_LABELS = {
    Priority.HIGH: "HIGH",
    Priority.MEDIUM: "MED",
    Priority.LOW: "LOW",
}


def format_toolbar(view: ViewConfig) -> str:
    search = f'"{view.search}"' if view.search else "-"
    shown = "shown" if view.show_completed else "hidden"
    return f"search: {search} | filter: {view.filter} | sort: {view.sort_by} | completed: {shown}"


def format_stats(stats: TaskStats) -> str:
    return (
        f"total {stats.total} | pending {stats.pending} | done {stats.completed} | "
        f"high {stats.high_priority_open} | overdue {stats.overdue}"
    )


def format_due(task: Task, now: datetime) -> str:
    if not task.due_date:
        return ""
    label = relative_date_label(task.due_date, now)
    if is_overdue(task, now):
        return f"due {label} (OVERDUE)"
    return f"due {label}"


def format_task_line(number: int, task: Task, now: datetime) -> str:
    box = "[x]" if task.is_completed else "[ ]"
    parts = [f"{number:>3}. {box} {task.title}", f"[{PRIORITY_LABELS[task.priority]}]"]
    due = format_due(task, now)
    if due:
        parts.append(due)
    if task.tags:
        parts.append(" ".join(f"#{t}" for t in task.tags))
    return "  ".join(parts)


def format_task_list(tasks: Sequence[Task], now: datetime) -> list[str]:
    if not tasks:
        return ["  (no tasks) use /add <title> or /new to create one"]
    lines: list[str] = []
    for i, task in enumerate(tasks, start=1):
        lines.append(format_task_line(i, task, now))
        if task.description:
            first = task.description.splitlines()[0]
            lines.append(f"          {first}")
    return lines


def format_task_details(task: Task, now: datetime) -> str:
    lines = [
        f"Task {task.id}",
        f"  title:       {task.title}",
        f"  status:      {'completed' if task.is_completed else 'pending'}",
        f"  priority:    {task.priority}",
        f"  due:         {task.due_date or '-'}" + (f" ({format_due(task, now)})" if task.due_date else ""),
        f"  tags:        {', '.join(task.tags) if task.tags else '-'}",
        f"  created:     {task.created_at}",
        f"  updated:     {task.updated_at}",
    ]
    if task.description:
        lines.append("  description:")
        lines.extend(f"    {line}" for line in task.description.splitlines())
    return "\n".join(lines)
