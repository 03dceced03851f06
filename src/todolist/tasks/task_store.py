# src/todolist/tasks/task_store.py

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..core.ports import ChangeListener, Clock, IdFactory, KeyValueStorage, TimerScheduler
from .task_codec import TaskDecodeError, dump_tasks, load_tasks
from .task_models import Task
from .undo import DEFAULT_UNDO_WINDOW_SECONDS, PendingDeletion, UndoWindow

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "react_todo_complete_v1"


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True, frozen=True)
class TaskCounts:
    total: int
    active: int
    completed: int


class TaskStore:
    """
    In-memory task collection backed by one key-value slot.

    - The collection is ordered; add() and undo_delete() prepend.
    - Every successful mutation rewrites the whole collection under `storage_key`
      and then notifies subscribers.
    - Storage failures never raise out of the store: a failed read yields an
      empty collection, a failed write is logged and in-memory state stays
      authoritative.
    - Invalid input (blank title, unknown id) is a silent no-op.

    Not thread-safe: all calls, including the undo timer callback, must run on
    one thread (an asyncio loop as the timer source guarantees that).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        timers: TimerScheduler,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        undo_window_seconds: float = DEFAULT_UNDO_WINDOW_SECONDS,
        clock: Clock = time.time,
        id_factory: IdFactory = new_task_id,
    ) -> None:
        self._storage = storage
        self._key = storage_key
        self._clock = clock
        self._id_factory = id_factory
        self._last_stamp = 0
        self._listeners: list[ChangeListener] = []
        self._undo = UndoWindow(
            timers,
            window_seconds=undo_window_seconds,
            on_expire=self._on_undo_expired,
        )
        self._tasks: list[Task] = self._load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    def close(self) -> None:
        """Shutdown hook: a pending deletion becomes permanent."""
        task = self._undo.finalize()
        if task is not None:
            logger.info("Pending deletion finalized on close task_id=%s", task.id)

    # ---- low-level helpers ----

    def _load(self) -> list[Task]:
        try:
            raw = self._storage.get_item(self._key)
        except Exception:
            logger.exception("Failed to read stored tasks key=%s; starting empty.", self._key)
            return []

        if raw is None:
            return []

        try:
            return load_tasks(raw)
        except TaskDecodeError as e:
            logger.warning("Ignoring unreadable stored tasks key=%s: %s", self._key, e)
            return []

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._key, dump_tasks(self._tasks))
        except Exception:
            logger.exception("Failed to persist tasks key=%s total=%s", self._key, len(self._tasks))

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Task change listener failed: %r", listener)

    def _changed(self) -> None:
        self._persist()
        self._notify()

    def _stamp(self) -> int:
        """Current time in epoch ms, strictly increasing per store."""
        now_ms = int(self._clock() * 1000)
        stamp = max(now_ms, self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    def _touch(self, task: Task, **changes: object) -> Task:
        updated_at = max(self._stamp(), task.updated_at + 1)
        return replace(task, **changes, updated_at=updated_at)

    def _new_id(self) -> str:
        taken = {t.id for t in self._tasks}
        pending = self._undo.pending
        if pending is not None:
            taken.add(pending.task.id)
        while True:
            task_id = self._id_factory()
            if task_id and task_id not in taken:
                return task_id
            logger.debug("Task id collision (%r); generating another", task_id)

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _on_undo_expired(self, task: Task) -> None:
        logger.info("Deletion is now permanent task_id=%s", task.id)
        self._notify()

    # ---- read API ----

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def undo_window_seconds(self) -> float:
        return self._undo.window_seconds

    @property
    def pending(self) -> PendingDeletion | None:
        return self._undo.pending

    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        i = self._index_of(task_id)
        return None if i is None else self._tasks[i]

    def counts(self) -> TaskCounts:
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskCounts(
            total=len(self._tasks),
            active=len(self._tasks) - completed,
            completed=completed,
        )

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- mutations ----

    def add(self, title: str, description: str = "") -> Task | None:
        title = (title or "").strip()
        if not title:
            logger.debug("add() ignored: blank title")
            return None

        now = self._stamp()
        task = Task(
            id=self._new_id(),
            title=title,
            description=(description or "").strip(),
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        self._changed()
        return task

    def toggle_complete(self, task_id: str) -> Task | None:
        i = self._index_of(task_id)
        if i is None:
            logger.debug("toggle_complete() ignored: unknown id=%s", task_id)
            return None

        task = self._touch(self._tasks[i], completed=not self._tasks[i].completed)
        self._tasks[i] = task
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        self._changed()
        return task

    def edit(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> Task | None:
        """
        Partial update. Fields left as None are untouched.

        A title, when given, is held to the same rule as add(): it is trimmed
        and a blank result turns the whole edit into a no-op.
        """
        i = self._index_of(task_id)
        if i is None:
            logger.debug("edit() ignored: unknown id=%s", task_id)
            return None

        changes: dict[str, object] = {}

        if title is not None:
            title = title.strip()
            if not title:
                logger.debug("edit() ignored: blank title id=%s", task_id)
                return None
            changes["title"] = title

        if description is not None:
            changes["description"] = description.strip()

        if completed is not None:
            changes["completed"] = bool(completed)

        if not changes:
            return None

        task = self._touch(self._tasks[i], **changes)
        self._tasks[i] = task
        logger.debug("Task edited id=%s fields=%s", task.id, sorted(changes))
        self._changed()
        return task

    def delete(self, task_id: str) -> Task | None:
        """
        Remove a task now and keep it undoable for the undo window.

        A delete while another deletion is pending makes the earlier one
        permanent first.
        """
        i = self._index_of(task_id)
        if i is None:
            logger.debug("delete() ignored: unknown id=%s", task_id)
            return None

        task = self._tasks.pop(i)
        superseded = self._undo.pending
        self._undo.open(task)
        if superseded is not None:
            logger.info("Deletion superseded, now permanent task_id=%s", superseded.task.id)
        logger.debug("Task deleted id=%s", task.id)
        self._changed()
        return task

    def undo_delete(self) -> Task | None:
        task = self._undo.take()
        if task is None:
            logger.debug("undo_delete() ignored: nothing pending")
            return None

        self._tasks.insert(0, task)
        logger.debug("Task restored id=%s", task.id)
        self._changed()
        return task

    def clear_completed(self) -> int:
        remaining = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(remaining)
        if not removed:
            return 0

        self._tasks = remaining
        logger.debug("Cleared completed tasks removed=%s", removed)
        self._changed()
        return removed
