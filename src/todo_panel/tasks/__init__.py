"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskValidationError)
- task_store.py: in-memory collection + create/update/delete/toggle
- task_view.py: filtering, sorting, stats and date labels for the panel
- task_api.py: small high-level helpers used by front ends (forms, quick add)
"""
