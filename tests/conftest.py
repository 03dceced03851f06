# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.core.state import AppState
from todolist.storage.kv import MemoryKeyValueStorage
from todolist.tasks.task_store import TaskStore
from todolist.tasks.task_view import TaskListView

from .fakes import FakeClock, FakeTimers


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command handlers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "unused",
        storage_key="todos-test",
        undo_window_seconds=5.0,
        default_filter="all",
        default_sort="created_desc",
    )


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture()
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(storage: MemoryKeyValueStorage, timers: FakeTimers, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, timers, storage_key="todos-test", clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState wired with an in-memory store and manual timers."""
    return AppState(settings=settings, store=store, view=TaskListView(store))
