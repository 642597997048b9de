# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_PANEL_APP_NAME": "Panel title (default: todo-panel).",
    "TODO_PANEL_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Paths (gitignored)
    "TODO_PANEL_DATA_DIR": "Local data directory (default: .local/todo_panel).",
    "TODO_PANEL_DATA_PATH": "Stored record, settings + todos (default: <data_dir>/panel.json).",
    # First-run panel defaults (afterwards the stored settings win)
    "TODO_PANEL_SHOW_COMPLETED": "Show completed tasks in the list (true/false, default: true).",
    "TODO_PANEL_SORT_BY": "createdAt | dueDate | priority (default: createdAt).",
    "TODO_PANEL_DEFAULT_PRIORITY": "low | medium | high for new tasks (default: medium).",
    "TODO_PANEL_DEFAULT_FILTER": "all | high | medium | low | completed | pending (default: all).",
}
