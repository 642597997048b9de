# src/todo_panel/connectors/console_panel.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.ports import Panel
from ..core.state import AppState, current_stats, visible_tasks
from .render import format_stats, format_task_list, format_toolbar

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]

EXIT_COMMANDS = ("/exit", "/quit", "/q")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsolePanel:
    """
    Console implementation of the Panel port.

    Owns the user-facing bits the core does not: the confirmation question
    before a delete, and the prompts of the create/edit form. Both are
    installed on the state so commands can reach them.
    """

    def __init__(
        self,
        state: AppState,
        *,
        registry: CommandRegistry | None = None,
        read: Reader = input,
        write: Writer = print,
    ) -> None:
        self.state = state
        self._registry = registry or command_registry
        self._read = read
        self._write = write
        self._disposed = False

        state.confirm = self.confirm
        state.prompt = self.ask

    # ---- Panel port ----

    def render(self) -> None:
        state = self.state
        now = state.clock()
        tasks = visible_tasks(state)
        state.visible_ids = [t.id for t in tasks]

        app_name = str(getattr(state.settings, "app_name", "todo-panel"))
        lines = [
            f"== {app_name} ==",
            format_toolbar(state.view),
            format_stats(current_stats(state)),
            "-" * 60,
            *format_task_list(tasks, now),
        ]
        self._write("\n".join(lines))

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.state.visible_ids = []
        logger.info("Console panel disposed.")

    def handle_event(self, event: str) -> bool:
        line = event.strip()
        if not line:
            return True

        if line.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            return False

        if not line.startswith("/"):
            self._write("Commands start with '/'. Try /add <title> or /help.")
            return True

        try:
            reply = self._registry.handle(self.state, line, emit=self.emit)
        except Exception:
            logger.exception("Command handler crashed.")
            self._write("Internal error while handling a command.")
            return True

        if self._registry.refreshes(line):
            self.render()
        if reply:
            self._write(reply)
        return True

    # ---- UI collaborators ----

    def emit(self, text: str) -> None:
        self._write(f"[{_ts_local()}] {text}")

    def confirm(self, message: str) -> bool:
        try:
            answer = self._read(f"{message} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in ("y", "yes")

    def ask(self, label: str, current: str) -> str:
        """Empty input keeps the current value; a single '-' clears it."""
        hint = f" [{current}]" if current else ""
        try:
            raw = self._read(f"{label}{hint}: ")
        except (EOFError, KeyboardInterrupt):
            return current
        value = raw.strip()
        if not value:
            return current
        if value == "-":
            return ""
        return value


def run_console_loop(state: AppState, *, read: Reader = input, write: Writer = print) -> None:
    panel: Panel = ConsolePanel(state, read=read, write=write)
    logger.info("Console panel started (tasks=%d).", len(state.store))
    write("Type /help for commands, /exit to quit.")
    panel.render()

    try:
        while True:
            try:
                line = read("> ")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                write("")
                break

            if not panel.handle_event(line):
                break
    finally:
        panel.dispose()

    logger.info("Console panel finished.")
