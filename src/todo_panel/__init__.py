"""Personal todo panel: task store, view projection and a console front end."""

__version__ = "0.1.0"
