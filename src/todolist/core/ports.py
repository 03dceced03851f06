# src/todolist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends and timer sources swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

Clock = Callable[[], float]
# Wall clock in seconds since the epoch (time.time-compatible).

IdFactory = Callable[[], str]

ChangeListener = Callable[[], None]


class KeyValueStorage(Protocol):
    """
    Durable string key-value slot (localStorage-like).

    get_item returns None for a missing key.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    """
    Source of one-shot cooperative timers.

    asyncio event loops satisfy this directly (loop.call_later), so callbacks
    run on the same thread as every other store operation.
    """

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle: ...
