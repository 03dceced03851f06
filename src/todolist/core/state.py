# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskListView


@dataclass
class AppState:
    # Settings object (todolist.config.Settings or a test stand-in).
    settings: object

    store: TaskStore
    view: TaskListView
