# src/todolist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the storage backend, timer source, store and view into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TimerScheduler
from ..core.state import AppState
from ..storage.kv import open_storage
from ..tasks.task_models import CompletionFilter, SortSpec, ViewParams
from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskListView

logger = logging.getLogger(__name__)


def _default_view_params(settings) -> ViewParams:
    params = ViewParams()
    try:
        params.completion_filter = CompletionFilter.parse(getattr(settings, "default_filter", "all"))
    except ValueError:
        logger.warning("Invalid default filter %r; using 'all'", getattr(settings, "default_filter", None))
    try:
        params.sort = SortSpec.parse(getattr(settings, "default_sort", "created_desc"))
    except ValueError:
        logger.warning("Invalid default sort %r; using 'created_desc'", getattr(settings, "default_sort", None))
    return params


def create_initial_state(timers: TimerScheduler, *, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    `timers` is the undo timer source; pass the running asyncio loop so the
    undo window expires on the same thread that handles commands.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    storage = open_storage(settings.storage_backend, settings.storage_path)
    store = TaskStore(
        storage,
        timers,
        storage_key=settings.storage_key,
        undo_window_seconds=settings.undo_window_seconds,
    )
    view = TaskListView(store, _default_view_params(settings))

    return AppState(settings=settings, store=store, view=view)
