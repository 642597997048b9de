# src/todo_panel/core/panel_settings.py

"""Persisted panel preferences (the "settings" half of the stored record)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_models import Priority
from ..tasks.task_view import FilterSelector, SortKey


@dataclass(frozen=True, slots=True)
class PanelSettings:
    show_completed: bool = True
    sort_by: SortKey = SortKey.CREATED_AT
    default_priority: Priority = Priority.MEDIUM
    default_filter: FilterSelector = FilterSelector.ALL

    def to_record(self) -> dict[str, Any]:
        return {
            "showCompleted": self.show_completed,
            "sortBy": self.sort_by.value,
            "defaultPriority": self.default_priority.value,
            "defaultFilter": self.default_filter.value,
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any] | None, defaults: PanelSettings | None = None) -> PanelSettings:
        base = defaults or cls()
        if not raw:
            return base

        show = raw.get("showCompleted", base.show_completed)
        return cls(
            show_completed=show if isinstance(show, bool) else base.show_completed,
            sort_by=SortKey.from_raw(raw.get("sortBy"), base.sort_by),
            default_priority=Priority.from_raw(raw.get("defaultPriority"), base.default_priority),
            default_filter=FilterSelector.from_raw(raw.get("defaultFilter"), base.default_filter),
        )
