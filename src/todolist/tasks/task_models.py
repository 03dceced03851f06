# src/todolist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class CompletionFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: CompletionFilter | str) -> CompletionFilter:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown completion filter {raw!r} (expected one of: {choices})") from None


class SortField(StrEnum):
    CREATED = "created"
    TITLE = "title"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(slots=True, frozen=True)
class SortSpec:
    """
    Sort order for the visible list.

    Renders to and parses from the token form used in storage and on the
    command line: "created_desc", "created_asc", "title_asc", "title_desc".
    """

    field: SortField = SortField.CREATED
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, raw: SortSpec | str) -> SortSpec:
        if isinstance(raw, SortSpec):
            return raw
        by, sep, direction = str(raw).strip().lower().partition("_")
        try:
            if not sep:
                raise ValueError(raw)
            return cls(SortField(by), SortDirection(direction))
        except ValueError:
            raise ValueError(
                f"unknown sort {raw!r} (expected created_desc, created_asc, title_asc or title_desc)"
            ) from None

    @property
    def token(self) -> str:
        return f"{self.field.value}_{self.direction.value}"

    def __str__(self) -> str:
        return self.token


DEFAULT_SORT = SortSpec()


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    completed: bool
    # Epoch milliseconds.
    created_at: int
    updated_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(slots=True)
class ViewParams:
    """Transient view state: never persisted."""

    query: str = ""
    completion_filter: CompletionFilter = CompletionFilter.ALL
    sort: SortSpec = DEFAULT_SORT
