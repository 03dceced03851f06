# tests/test_task_view.py

from __future__ import annotations

import pytest

from todolist.tasks.task_models import CompletionFilter, SortDirection, SortField, SortSpec, ViewParams
from todolist.tasks.task_store import TaskStore
from todolist.tasks.task_view import TaskListView, project

from .fakes import make_task


@pytest.fixture()
def tasks():
    # Insertion order deliberately differs from creation order.
    return [
        make_task("t2", "Walk dog", 200),
        make_task("t1", "Buy milk", 100, description="oat, 2 litres"),
        make_task("t4", "Call mom", 400, completed=True),
        make_task("t3", "buy bread", 300, completed=True, description="from the bakery"),
    ]


def _ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def test_default_projection_is_newest_first(tasks) -> None:
    assert _ids(project(tasks, "", "all", "created_desc")) == ["t4", "t3", "t2", "t1"]
    assert _ids(project(tasks)) == ["t4", "t3", "t2", "t1"]


def test_created_ascending(tasks) -> None:
    assert _ids(project(tasks, sort="created_asc")) == ["t1", "t2", "t3", "t4"]


def test_search_matches_title_case_insensitively(tasks) -> None:
    only_milk = [make_task("a", "Buy milk", 1), make_task("b", "Walk dog", 2)]
    assert _ids(project(only_milk, "milk", "all")) == ["a"]
    assert _ids(project(tasks, "BUY")) == ["t3", "t1"]


def test_search_matches_description(tasks) -> None:
    assert _ids(project(tasks, "bakery")) == ["t3"]
    assert _ids(project(tasks, "Litres")) == ["t1"]


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_keeps_everything(tasks, query: str) -> None:
    assert len(project(tasks, query)) == 4


def test_completion_filters(tasks) -> None:
    assert _ids(project(tasks, completion_filter="active")) == ["t2", "t1"]
    assert _ids(project(tasks, completion_filter=CompletionFilter.COMPLETED)) == ["t4", "t3"]


def test_search_filter_and_sort_combine(tasks) -> None:
    assert _ids(project(tasks, "buy", "completed", "created_asc")) == ["t3"]
    assert _ids(project(tasks, "buy", "active", "title_asc")) == ["t1"]


def test_title_sort_is_locale_style() -> None:
    tasks = [
        make_task("1", "banana", 1),
        make_task("2", "Apple", 2),
        make_task("3", "Éclair", 3),
        make_task("4", "cherry", 4),
        make_task("5", "apple", 5),
        make_task("6", "date", 6),
    ]

    asc = [t.title for t in project(tasks, sort="title_asc")]
    desc = [t.title for t in project(tasks, sort="title_desc")]

    assert asc == ["apple", "Apple", "banana", "cherry", "date", "Éclair"]
    assert desc == list(reversed(asc))


def test_equal_keys_keep_input_order() -> None:
    tasks = [make_task("x", "Same", 5), make_task("y", "Same", 5)]
    assert _ids(project(tasks, sort="title_asc")) == ["x", "y"]
    assert _ids(project(tasks, sort="created_desc")) == ["x", "y"]


def test_project_does_not_mutate_input(tasks) -> None:
    before = list(tasks)
    out = project(tasks, "buy", "active", "title_desc")
    out.clear()
    assert tasks == before


def test_invalid_view_parameters_raise(tasks) -> None:
    with pytest.raises(ValueError):
        project(tasks, completion_filter="done")
    with pytest.raises(ValueError):
        project(tasks, sort="priority_asc")


def test_sort_spec_parse_and_token() -> None:
    spec = SortSpec.parse("title_desc")
    assert spec == SortSpec(SortField.TITLE, SortDirection.DESC)
    assert spec.token == "title_desc"
    assert str(SortSpec()) == "created_desc"
    assert SortSpec.parse(spec) is spec
    with pytest.raises(ValueError):
        SortSpec.parse("created")


def test_completion_filter_parse() -> None:
    assert CompletionFilter.parse(" Active ") is CompletionFilter.ACTIVE
    with pytest.raises(ValueError):
        CompletionFilter.parse("pending")


def test_list_view_follows_store_and_params(store: TaskStore) -> None:
    view = TaskListView(store)
    assert view.visible == []

    milk = store.add("Buy milk")
    dog = store.add("Walk dog")
    assert milk and dog
    assert _ids(view.visible) == [dog.id, milk.id]

    view.set_query("milk")
    assert _ids(view.visible) == [milk.id]

    store.toggle_complete(milk.id)
    view.set_filter("active")
    assert view.visible == []

    view.set_query("")
    view.set_sort("title_asc")
    assert _ids(view.visible) == [dog.id]
    assert view.params == ViewParams("", CompletionFilter.ACTIVE, SortSpec.parse("title_asc"))

    with pytest.raises(ValueError):
        view.set_sort("nonsense")
    assert view.params.sort.token == "title_asc"


def test_list_view_close_unsubscribes(store: TaskStore) -> None:
    view = TaskListView(store, ViewParams(completion_filter=CompletionFilter.ALL))
    view.close()
    store.add("Buy milk")
    assert view.visible == []
