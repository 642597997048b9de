# src/todo_panel/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from dataclasses import replace
from typing import cast

from ..connectors.render import format_stats, format_task_details
from ..core.state import AppState, current_stats, reload_state, update_panel_settings
from ..tasks.task_api import (
    TaskForm,
    apply_edits,
    form_from_task,
    parse_edit_pairs,
    parse_priority,
    parse_quick_add,
    submit_form,
    task_from_form,
)
from ..tasks.task_models import Task, TaskValidationError
from ..tasks.task_view import FilterSelector, SortKey

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

NOT_SAVED = " (warning: could not save to disk)"


class CommandRegistry:
    """Simple slash-command registry used by the panel (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._quiet: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        refresh: bool = True,
    ) -> None:
        """refresh=False marks informational commands the panel should not redraw for."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            if not refresh:
                self._quiet.add(alias.lower())
        if not refresh:
            self._quiet.add(key)

    @staticmethod
    def _split(line: str) -> list[str]:
        try:
            return shlex.split(line[1:])
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace split.
            return line[1:].split()

    def refreshes(self, line: str) -> bool:
        parts = self._split(line) if line.startswith("/") else []
        return bool(parts) and parts[0].lower() not in self._quiet

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = self._split(line)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskValidationError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task(state: AppState, ref: str) -> Task | None:
    """Display number from the last render, full id, or unique id prefix."""
    ref = ref.strip().lstrip("#")
    if not ref:
        return None

    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(state.visible_ids):
            return state.store.get(state.visible_ids[n - 1])

    task = state.store.get(ref)
    if task is not None:
        return task

    matches = [t for t in state.store.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _saved(state: AppState, text: str) -> str:
    return text if state.store.last_save_ok else text + NOT_SAVED


def _run_form(state: AppState, existing: Task | None) -> TaskForm | None:
    ask = state.prompt
    if ask is None:
        return None
    seed = form_from_task(existing) if existing else TaskForm(
        priority=state.panel_settings.default_priority.value,
        due_date=state.clock().date().isoformat(),
    )
    return TaskForm(
        title=ask("Title", seed.title),
        description=ask("Description", seed.description),
        priority=ask("Priority (low/medium/high)", seed.priority),
        due_date=ask("Due date (YYYY-MM-DD, empty for none)", seed.due_date),
        tags_raw=ask("Tags (comma separated)", seed.tags_raw),
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add Buy milk !high due:tomorrow #errand"""
    if not args:
        return "Usage: /add <title> [!low|!medium|!high] [due:YYYY-MM-DD] [#tag ...]"
    candidate = parse_quick_add(
        args,
        default_priority=state.panel_settings.default_priority,
        now=state.clock(),
    )
    created = state.store.create(candidate)
    return _saved(state, f'Task created: "{created.title}".')


def cmd_new(state: AppState, args: list[str]) -> str:
    form = _run_form(state, None)
    if form is None:
        return "Interactive form is not available here; use /add <title>."
    candidate = task_from_form(form, default_priority=state.panel_settings.default_priority, now=state.clock())
    created = state.store.create(candidate)
    return _saved(state, f'Task created: "{created.title}".')


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n|id>                    -> interactive form
    /edit <n|id> key=value ...      -> title=, desc=, priority=, due=, tags=
    """
    if not args:
        return "Usage: /edit <n|id> [title=... desc=... priority=... due=... tags=a,b]"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."

    if len(args) == 1:
        form = _run_form(state, task)
        if form is None:
            return "Interactive form is not available here; use /edit <n|id> key=value."
        updated = submit_form(
            state.store,
            form,
            existing=task,
            default_priority=state.panel_settings.default_priority,
        )
    else:
        candidate = apply_edits(task, parse_edit_pairs(args[1:]), now=state.clock())
        updated = state.store.update(candidate)

    if updated is None:
        return f"No task matches {args[0]!r}."
    return _saved(state, f'Task updated: "{updated.title}".')


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."
    toggled = state.store.toggle_completion(task.id)
    if toggled is None:
        return f"No task matches {args[0]!r}."
    status = "completed" if toggled.is_completed else "reopened"
    return _saved(state, f'Task {status}: "{toggled.title}".')


def cmd_rm(state: AppState, args: list[str]) -> str:
    """/rm <n|id> asks first; /rm <n|id> -y skips the question."""
    refs = [a for a in args if a not in ("-y", "--yes")]
    if len(refs) != 1:
        return "Usage: /rm <n|id> [-y]"
    task = resolve_task(state, refs[0])
    if task is None:
        return f"No task matches {refs[0]!r}."

    skip_confirm = len(refs) != len(args)
    if not skip_confirm and not state.confirm(f'Delete task "{task.title}"?'):
        return "Delete cancelled."

    state.store.delete(task.id)
    return _saved(state, "Task deleted.")


def cmd_search(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    if not text.strip():
        text = ""
    state.view = replace(state.view, search=text)
    return f'Searching for "{text}".' if text else "Search cleared."


def cmd_tag(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /tag <tag>"
    return cmd_search(state, [args[0].lstrip("#")])


def cmd_filter(state: AppState, args: list[str]) -> str:
    valid = ", ".join(f.value for f in FilterSelector)
    if len(args) != 1:
        return f"Usage: /filter <{valid}>"
    try:
        selector = FilterSelector(args[0].lower())
    except ValueError:
        return f"Unknown filter {args[0]!r}. Use one of: {valid}."
    state.view = replace(state.view, filter=selector)
    return f"Filter: {selector}."


def cmd_sort(state: AppState, args: list[str]) -> str:
    valid = ", ".join(k.value for k in SortKey)
    if len(args) != 1:
        return f"Usage: /sort <{valid}>"
    key = SortKey.lookup(args[0])
    if key is None:
        return f"Unknown sort key {args[0]!r}. Use one of: {valid}."
    ok = update_panel_settings(state, sort_by=key)
    return f"Sorted by {key}." + ("" if ok else NOT_SAVED)


def cmd_show_completed(state: AppState, args: list[str]) -> str:
    if len(args) != 1 or args[0].lower() not in ("on", "off", "1", "0", "true", "false", "yes", "no"):
        current = "on" if state.panel_settings.show_completed else "off"
        return f"Completed tasks are {current}. Use /show-completed on|off."
    value = args[0].lower() in ("on", "1", "true", "yes")
    ok = update_panel_settings(state, show_completed=value)
    return f"Completed tasks {'shown' if value else 'hidden'}." + ("" if ok else NOT_SAVED)


def cmd_priority(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return f"Default priority is {state.panel_settings.default_priority}. Use /priority low|medium|high."
    level = parse_priority(args[0])
    ok = update_panel_settings(state, default_priority=level)
    return f"Default priority: {level}." + ("" if ok else NOT_SAVED)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(current_stats(state))


def cmd_show(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /show <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."
    return format_task_details(task, state.clock())


def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit(f"Reloading from {state.repo.path}...")
    total = reload_state(state)
    return f"Reloaded {total} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"], refresh=False)
registry.register("add", cmd_add, help_text="Quick add: /add <title> [!high] [due:YYYY-MM-DD] [#tag].")
registry.register("new", cmd_new, help_text="Create a task with the interactive form.")
registry.register("edit", cmd_edit, help_text="Edit: /edit <n|id> [title=.. desc=.. priority=.. due=.. tags=..].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.", aliases=["toggle", "x"])
registry.register("rm", cmd_rm, help_text="Delete (asks first): /rm <n|id> [-y].", aliases=["delete", "del"])
registry.register("search", cmd_search, help_text="Search title/description/tags: /search [text].", aliases=["s"])
registry.register("tag", cmd_tag, help_text="Search by tag: /tag <tag>.")
registry.register("filter", cmd_filter, help_text="Filter: /filter all|high|medium|low|completed|pending.")
registry.register("sort", cmd_sort, help_text="Sort: /sort createdAt|dueDate|priority (saved).")
registry.register("show-completed", cmd_show_completed, help_text="Show completed tasks: on|off (saved).")
registry.register("priority", cmd_priority, help_text="Default priority for new tasks (saved).")
registry.register("stats", cmd_stats, help_text="Show totals.", refresh=False)
registry.register("show", cmd_show, help_text="Task details: /show <n|id>.", refresh=False)
registry.register("reload", cmd_reload, help_text="Re-read tasks and settings from disk.")
