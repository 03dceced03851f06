# src/todolist/tasks/task_codec.py

"""
JSON codec for the persisted task collection.

Wire format: a JSON array of objects
    {"id", "title", "description", "completed", "createdAt", "updatedAt"}
with timestamps as integer epoch milliseconds.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from typing import Any

from .task_models import Task

logger = logging.getLogger(__name__)


class TaskDecodeError(ValueError):
    """Stored value is not a JSON array of tasks."""


def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def _as_millis(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return int(raw)
    return None


def task_from_dict(raw: Any) -> Task | None:
    """
    Build a Task from one decoded entry.

    Returns None for entries that cannot form a valid task
    (not an object, missing id, blank title).
    """
    if not isinstance(raw, dict):
        return None

    task_id = raw.get("id")
    if not isinstance(task_id, str) or not task_id:
        return None

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    description = raw.get("description")
    created_at = _as_millis(raw.get("createdAt"))
    updated_at = _as_millis(raw.get("updatedAt"))
    if created_at is None:
        created_at = updated_at or 0
    if updated_at is None:
        updated_at = created_at

    return Task(
        id=task_id,
        title=title,
        description=description if isinstance(description, str) else "",
        completed=raw.get("completed") is True,
        created_at=created_at,
        updated_at=updated_at,
    )


def load_tasks(raw: str) -> list[Task]:
    """
    Decode a stored collection.

    Raises TaskDecodeError if the value is not JSON or not an array.
    Invalid entries and duplicate ids (after the first) are dropped.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise TaskDecodeError(f"stored tasks are not valid JSON: {e}") from e
    except RecursionError as e:
        raise TaskDecodeError("stored tasks are nested too deeply") from e

    if not isinstance(data, list):
        raise TaskDecodeError(f"stored tasks must be a JSON array, got {type(data).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for entry in data:
        task = task_from_dict(entry)
        if task is None:
            logger.debug("Skipping invalid stored task entry: %r", entry)
            continue
        if task.id in seen:
            logger.debug("Skipping duplicate stored task id=%s", task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out
