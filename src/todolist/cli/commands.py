# src/todolist/cli/commands.py

from __future__ import annotations

from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, str], str]


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        The handler receives everything after the command name, stripped.
        """
        if not line.startswith("/"):
            return None

        name, _, arg = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        name = name.lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, arg.strip())

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def _short_id(task: Task) -> str:
    return task.id[:8]


def render_task_list(state: AppState) -> str:
    visible = state.view.visible
    lines: list[str] = []

    if not visible:
        lines.append("No todos found.")
    for i, task in enumerate(visible, start=1):
        mark = "x" if task.completed else " "
        lines.append(f"[{mark}] {i}. {task.title}  ({_short_id(task)})")
        if task.description:
            lines.append(f"       {task.description}")

    counts = state.store.counts()
    lines.append(f"{counts.total} total ({counts.active} active, {counts.completed} completed)")

    pending = state.store.pending
    if pending is not None:
        lines.append(f'Deleted "{pending.task.title}" (use /undo)')

    return "\n".join(lines)


def _resolve(state: AppState, ref: str) -> Task | None:
    """
    Find a task by 1-based position in the visible list, full id, or unique id prefix.

    A number that is not a valid position is tried as an id, so all-digit
    short ids still resolve.
    """
    ref = ref.strip()
    if not ref:
        return None

    if ref.isdigit():
        idx = int(ref) - 1
        visible = state.view.visible
        if 0 <= idx < len(visible):
            return visible[idx]

    task = state.store.get(ref)
    if task is not None:
        return task

    matches = [t for t in state.store.tasks() if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _split_title_description(text: str) -> tuple[str, str | None]:
    title, sep, description = text.partition("|")
    return title.strip(), (description.strip() if sep else None)


# ---- handlers ----


def cmd_help(state: AppState, arg: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, arg: str) -> str:
    return render_task_list(state)


def cmd_add(state: AppState, arg: str) -> str:
    """/add <title> [| description]"""
    title, description = _split_title_description(arg)
    task = state.store.add(title, description or "")
    if task is None:
        return "Usage: /add <title> [| description] (title must not be blank)."
    return f'Added "{task.title}".\n' + render_task_list(state)


def cmd_done(state: AppState, arg: str) -> str:
    task = _resolve(state, arg)
    if task is None:
        return f"No such task: {arg or '(missing)'}. Usage: /done <n|id>."
    updated = state.store.toggle_complete(task.id)
    if updated is None:
        return f"No such task: {arg}."
    status = "completed" if updated.completed else "active"
    return f'"{updated.title}" is now {status}.\n' + render_task_list(state)


def cmd_edit(state: AppState, arg: str) -> str:
    """
    /edit <n|id> <title>
    /edit <n|id> <title> | <description>
    /edit <n|id> | <description>
    """
    ref, _, rest = arg.partition(" ")
    task = _resolve(state, ref)
    if task is None:
        return f"No such task: {ref or '(missing)'}. Usage: /edit <n|id> <title> [| description]."

    title, description = _split_title_description(rest)
    if not title and description is None:
        return "Nothing to change. Usage: /edit <n|id> <title> [| description]."

    updated = state.store.edit(task.id, title=title or None, description=description)
    if updated is None:
        return f"No such task: {ref}."
    return f'Updated "{updated.title}".\n' + render_task_list(state)


def cmd_rm(state: AppState, arg: str) -> str:
    task = _resolve(state, arg)
    if task is None:
        return f"No such task: {arg or '(missing)'}. Usage: /rm <n|id>."
    if state.store.delete(task.id) is None:
        return f"No such task: {arg}."
    return render_task_list(state)


def cmd_undo(state: AppState, arg: str) -> str:
    task = state.store.undo_delete()
    if task is None:
        return "Nothing to undo."
    return f'Restored "{task.title}".\n' + render_task_list(state)


def cmd_clear(state: AppState, arg: str) -> str:
    removed = state.store.clear_completed()
    return f"Cleared {removed} completed task(s).\n" + render_task_list(state)


def cmd_filter(state: AppState, arg: str) -> str:
    if not arg:
        return f"Filter is {state.view.params.completion_filter.value}. Use /filter all|active|completed."
    try:
        state.view.set_filter(arg)
    except ValueError as e:
        return f"Invalid filter: {e}"
    return render_task_list(state)


def cmd_sort(state: AppState, arg: str) -> str:
    if not arg:
        return (
            f"Sort is {state.view.params.sort.token}. "
            "Use /sort created_desc|created_asc|title_asc|title_desc."
        )
    try:
        state.view.set_sort(arg)
    except ValueError as e:
        return f"Invalid sort: {e}"
    return render_task_list(state)


def cmd_search(state: AppState, arg: str) -> str:
    """/search <text> narrows the list; /search alone clears it."""
    state.view.set_query(arg)
    return render_task_list(state)


def cmd_status(state: AppState, arg: str) -> str:
    params = state.view.params
    settings = state.settings
    return (
        "Status:\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} "
        f"({getattr(settings, 'storage_path', '?')}) key={state.store.storage_key}\n"
        f"  Undo window: {state.store.undo_window_seconds:g}s\n"
        f"  View: filter={params.completion_filter.value} sort={params.sort.token} "
        f"search={params.query!r}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the visible tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].", aliases=["a"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.", aliases=["toggle"])
registry.register(
    "edit", cmd_edit, help_text="Edit a task: /edit <n|id> <title> [| description]."
)
registry.register("rm", cmd_rm, help_text="Delete a task (undoable for a few seconds): /rm <n|id>.", aliases=["del"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("filter", cmd_filter, help_text="Completion filter: /filter all|active|completed.")
registry.register("sort", cmd_sort, help_text="Sort: /sort created_desc|created_asc|title_asc|title_desc.")
registry.register("search", cmd_search, help_text="Search titles/descriptions: /search [text].", aliases=["find"])
registry.register("status", cmd_status, help_text="Show storage and view settings.")
