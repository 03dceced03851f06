# src/todolist/tasks/task_view.py

from __future__ import annotations

"""
Derived views over the task collection.

project() is a pure function: search, then completion filter, then sort.
TaskListView keeps the current view parameters and recomputes the visible
list whenever the store changes or a parameter is set.
"""

import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import replace

from .task_models import (
    DEFAULT_SORT,
    CompletionFilter,
    SortDirection,
    SortField,
    SortSpec,
    Task,
    ViewParams,
)
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def title_collation_key(title: str) -> tuple[str, str, str]:
    """
    Locale-style ordering key for titles.

    Primary: letters with accents stripped, case-folded ("é" sorts with "e").
    Then accents, then case with lowercase first.
    """
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return base, title.casefold(), title.swapcase()


def _matches(task: Task, needle: str) -> bool:
    return needle in task.title.casefold() or needle in (task.description or "").casefold()


def project(
    tasks: Iterable[Task],
    query: str = "",
    completion_filter: CompletionFilter | str = CompletionFilter.ALL,
    sort: SortSpec | str = DEFAULT_SORT,
) -> list[Task]:
    """
    Compute the visible, ordered list. Never mutates `tasks`.

    Raises ValueError for an unknown filter or sort string.
    """
    flt = CompletionFilter.parse(completion_filter)
    spec = SortSpec.parse(sort)

    out = list(tasks)

    if query.strip():
        needle = query.casefold()
        out = [t for t in out if _matches(t, needle)]

    if flt == CompletionFilter.ACTIVE:
        out = [t for t in out if not t.completed]
    elif flt == CompletionFilter.COMPLETED:
        out = [t for t in out if t.completed]

    reverse = spec.direction == SortDirection.DESC
    if spec.field == SortField.CREATED:
        out.sort(key=lambda t: t.created_at, reverse=reverse)
    elif spec.field == SortField.TITLE:
        out.sort(key=lambda t: title_collation_key(t.title), reverse=reverse)

    return out


class TaskListView:
    """Visible task list bound to a store."""

    def __init__(self, store: TaskStore, params: ViewParams | None = None) -> None:
        self._store = store
        self._params = params or ViewParams()
        self._visible: list[Task] = []
        self._unsubscribe = store.subscribe(self.refresh)
        self.refresh()

    def close(self) -> None:
        self._unsubscribe()

    @property
    def params(self) -> ViewParams:
        return replace(self._params)

    @property
    def visible(self) -> list[Task]:
        return list(self._visible)

    def refresh(self) -> None:
        p = self._params
        self._visible = project(self._store.tasks(), p.query, p.completion_filter, p.sort)
        logger.debug(
            "View refreshed visible=%d query=%r filter=%s sort=%s",
            len(self._visible),
            p.query,
            p.completion_filter.value,
            p.sort.token,
        )

    def set_query(self, query: str) -> None:
        self._params.query = query or ""
        self.refresh()

    def set_filter(self, completion_filter: CompletionFilter | str) -> None:
        self._params.completion_filter = CompletionFilter.parse(completion_filter)
        self.refresh()

    def set_sort(self, sort: SortSpec | str) -> None:
        self._params.sort = SortSpec.parse(sort)
        self.refresh()
