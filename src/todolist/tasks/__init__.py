"""
Task subsystem.

Components:
- task_models.py: data structures (Task, ViewParams, CompletionFilter, SortSpec)
- task_codec.py: JSON encoding of the persisted collection
- task_store.py: the task collection, its mutations and persistence
- task_view.py: search/filter/sort projection and the bound list view
- undo.py: the single pending deletion and its timer
"""
