# src/todolist/tasks/undo.py

from __future__ import annotations

"""
Undo window for deletions.

At most one deletion is pending at a time. Its lifecycle:

    NONE -> PENDING -> NONE   (timer fired: deletion becomes permanent)
                    -> NONE   (take(): undo, timer cancelled)
                    -> NONE   (finalize(): superseded by another delete / shutdown)

Exactly one exit happens per pending deletion. A timer callback that belongs
to a deletion which already left PENDING is ignored.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..core.ports import TimerHandle, TimerScheduler
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_UNDO_WINDOW_SECONDS = 5.0


@dataclass(slots=True, eq=False)
class PendingDeletion:
    task: Task
    handle: TimerHandle | None = None


class UndoWindow:
    def __init__(
        self,
        timers: TimerScheduler,
        *,
        window_seconds: float = DEFAULT_UNDO_WINDOW_SECONDS,
        on_expire: Callable[[Task], None] | None = None,
    ) -> None:
        self._timers = timers
        self._window_seconds = max(0.0, float(window_seconds))
        self._on_expire = on_expire
        self._pending: PendingDeletion | None = None

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def pending(self) -> PendingDeletion | None:
        return self._pending

    def open(self, task: Task) -> PendingDeletion:
        """Start a new window for `task`, finalizing any previous one."""
        self.finalize()

        record = PendingDeletion(task=task)
        self._pending = record
        record.handle = self._timers.call_later(self._window_seconds, lambda: self._expire(record))
        logger.debug("Undo window opened task_id=%s seconds=%s", task.id, self._window_seconds)
        return record

    def take(self) -> Task | None:
        """Close the window for undo: cancel the timer and hand back the task."""
        record = self._pending
        if record is None:
            return None
        self._pending = None
        if record.handle is not None:
            record.handle.cancel()
        logger.debug("Undo window taken task_id=%s", record.task.id)
        return record.task

    def finalize(self) -> Task | None:
        """Make the pending deletion permanent right away."""
        record = self._pending
        if record is None:
            return None
        self._pending = None
        if record.handle is not None:
            record.handle.cancel()
        logger.debug("Undo window finalized early task_id=%s", record.task.id)
        return record.task

    def _expire(self, record: PendingDeletion) -> None:
        if self._pending is not record:
            # Stale timer (already undone or finalized).
            return
        self._pending = None
        logger.debug("Undo window expired task_id=%s", record.task.id)
        if self._on_expire is not None:
            self._on_expire(record.task)
