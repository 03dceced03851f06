# src/todolist/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def handle_line(state: AppState, line: str) -> str | None:
    """
    Dispatch one console line.

    Slash commands go to the registry; any other non-empty text is added as a
    new task title. Returns the reply to print (None for nothing).
    """
    line = line.strip()
    if not line:
        return None

    if not line.startswith("/"):
        line = f"/add {line}"

    try:
        return command_registry.handle(state, line)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def _read_in_thread(loop: asyncio.AbstractEventLoop, read_line: Callable[[str], str]) -> asyncio.Future[str]:
    """
    Run one blocking read in a daemon thread and hand the result to the loop.

    The thread is never joined: if the loop is cancelled (Ctrl-C) while input()
    blocks, shutdown does not wait for it.
    """
    fut: asyncio.Future[str] = loop.create_future()

    def _resolve(result: str | None, error: Exception | None) -> None:
        if fut.done():
            return
        if error is not None:
            fut.set_exception(error)
        else:
            fut.set_result(result or "")

    def _worker() -> None:
        try:
            line = read_line(PROMPT)
        except Exception as e:
            outcome: tuple[str | None, Exception | None] = (None, e)
        else:
            outcome = (line, None)
        # The loop may already be closed after an interrupt.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(_resolve, *outcome)

    threading.Thread(target=_worker, name="console-input", daemon=True).start()
    return fut


async def run_console_loop(state: AppState, *, read_line: Callable[[str], str] = input) -> None:
    """
    Interactive REPL.

    Blocking input runs in a daemon thread; each line is handled back on the
    event loop, so commands never interleave with the undo timer. Ctrl-C
    cancels the loop task and the pending read is abandoned.
    """
    loop = asyncio.get_running_loop()
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.")

    try:
        while True:
            try:
                user_input = await _read_in_thread(loop, read_line)
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if user_input.strip().lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            reply = handle_line(state, user_input)
            if reply is not None:
                _print_ts(reply)
    except asyncio.CancelledError:
        logger.info("Console interrupted, exiting.")
        print()
        raise

    logger.info("Console connector finished.")
