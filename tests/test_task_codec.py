# tests/test_task_codec.py

from __future__ import annotations

import json

import pytest

from todolist.tasks.task_codec import TaskDecodeError, dump_tasks, load_tasks

from .fakes import make_task


@pytest.mark.parametrize("count", [0, 1, 5])
def test_collection_round_trip(count: int) -> None:
    tasks = [
        make_task(f"id-{i}", f"Task {i}", 1_700_000_000_000 + i, completed=i % 2 == 0, description=f"d{i}")
        for i in range(count)
    ]
    assert load_tasks(dump_tasks(tasks)) == tasks


def test_dump_uses_camel_case_keys() -> None:
    raw = dump_tasks([make_task("a", "Buy milk", 5, description="oat")])
    assert json.loads(raw) == [
        {
            "id": "a",
            "title": "Buy milk",
            "description": "oat",
            "completed": False,
            "createdAt": 5,
            "updatedAt": 5,
        }
    ]


def test_dump_keeps_unicode_readable() -> None:
    assert "Café" in dump_tasks([make_task("a", "Café", 1)])


def test_load_skips_invalid_and_duplicate_entries() -> None:
    raw = json.dumps(
        [
            {"id": "a", "title": "Buy milk", "completed": True, "createdAt": 10, "updatedAt": 20},
            {"id": "a", "title": "Duplicate", "createdAt": 11, "updatedAt": 11},
            {"id": "b", "title": "   ", "createdAt": 12, "updatedAt": 12},
            {"title": "no id"},
            "not an object",
            {"id": "c", "title": "Walk dog", "description": None, "createdAt": 13.7},
        ]
    )

    tasks = load_tasks(raw)

    assert [t.id for t in tasks] == ["a", "c"]
    assert tasks[0].completed is True
    assert (tasks[0].created_at, tasks[0].updated_at) == (10, 20)
    assert tasks[1].description == ""
    assert (tasks[1].created_at, tasks[1].updated_at) == (13, 13)


@pytest.mark.parametrize("raw", ["", "{", "null", '{"id": "a"}', '"text"'])
def test_load_rejects_non_array_values(raw: str) -> None:
    with pytest.raises(TaskDecodeError):
        load_tasks(raw)


@pytest.mark.parametrize("stamp", ["NaN", "Infinity", "-Infinity", "1e400"])
def test_load_ignores_non_finite_timestamps(stamp: str) -> None:
    raw = f'[{{"id": "a", "title": "Buy milk", "createdAt": {stamp}, "updatedAt": 7}}]'

    [task] = load_tasks(raw)

    assert (task.created_at, task.updated_at) == (7, 7)


def test_load_rejects_deeply_nested_value() -> None:
    with pytest.raises(TaskDecodeError):
        load_tasks("[" * 100_000 + "]" * 100_000)


@pytest.mark.parametrize("flag", ["false", '"false"', '"true"', "1", "null"])
def test_load_only_accepts_boolean_true_as_completed(flag: str) -> None:
    [task] = load_tasks(f'[{{"id": "a", "title": "Buy milk", "completed": {flag}}}]')
    assert task.completed is False
