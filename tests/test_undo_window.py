# tests/test_undo_window.py

from __future__ import annotations

import asyncio

import pytest

from todolist.storage.kv import MemoryKeyValueStorage
from todolist.tasks.task_store import TaskStore
from todolist.tasks.undo import UndoWindow

from .fakes import FakeTimers, make_task


def test_window_expiry_and_take_are_exclusive() -> None:
    timers = FakeTimers()
    expired = []
    window = UndoWindow(timers, window_seconds=5.0, on_expire=expired.append)
    task = make_task("a", "Buy milk", 1)

    window.open(task)
    assert window.take() == task
    timers.advance(10.0)

    assert expired == []
    assert window.pending is None
    assert window.take() is None


def test_window_expires_once() -> None:
    timers = FakeTimers()
    expired = []
    window = UndoWindow(timers, window_seconds=5.0, on_expire=expired.append)
    task = make_task("a", "Buy milk", 1)

    window.open(task)
    timers.advance(5.0)
    timers.advance(5.0)

    assert expired == [task]
    assert window.take() is None
    # Cancelling a timer that already fired is harmless.
    timers.timers[0].cancel()


def test_stale_timer_callback_is_ignored() -> None:
    timers = FakeTimers()
    expired = []
    window = UndoWindow(timers, window_seconds=5.0, on_expire=expired.append)
    first = make_task("a", "A", 1)
    second = make_task("b", "B", 2)

    window.open(first)
    window.open(second)
    # Fire the superseded timer by hand, as a racing scheduler might.
    timers.timers[0].callback()

    assert expired == []
    assert window.pending is not None and window.pending.task == second


def test_negative_window_is_clamped() -> None:
    window = UndoWindow(FakeTimers(), window_seconds=-1)
    assert window.window_seconds == 0.0


@pytest.mark.asyncio
async def test_undo_window_expires_on_event_loop() -> None:
    loop = asyncio.get_running_loop()
    store = TaskStore(MemoryKeyValueStorage(), loop, undo_window_seconds=0.05)
    task = store.add("Buy milk")
    assert task is not None

    store.delete(task.id)
    assert store.pending is not None

    await asyncio.sleep(0.2)

    assert store.pending is None
    assert store.undo_delete() is None
    assert store.tasks() == []


@pytest.mark.asyncio
async def test_undo_on_event_loop_cancels_timer() -> None:
    loop = asyncio.get_running_loop()
    store = TaskStore(MemoryKeyValueStorage(), loop, undo_window_seconds=0.05)
    notified = []
    store.subscribe(lambda: notified.append(store.pending is not None))
    task = store.add("Buy milk")
    assert task is not None

    store.delete(task.id)
    handle = store.pending.handle
    restored = store.undo_delete()

    await asyncio.sleep(0.2)

    assert restored == task
    assert store.tasks() == [task]
    assert handle.cancelled()
    # add, delete, undo; no expiry notification after the undo.
    assert notified == [False, True, False]
