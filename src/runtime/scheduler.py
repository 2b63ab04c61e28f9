"""
Cancellable tick scheduling for the realtime loop.

A Ticker runs an async callback once after its interval. The loop controller
reschedules after every completed pass, so a slow model simply lowers the
tick rate instead of piling up passes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol, Set

TickCallback = Callable[[], Awaitable[None]]


class Ticker(Protocol):
    def schedule(self, callback: TickCallback) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class AsyncioTicker:
    """Ticker on the running asyncio loop, one tick per display refresh by default."""

    def __init__(self, interval_s: float = 1 / 60):
        self.interval_s = interval_s
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, callback: TickCallback) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(self.interval_s, self._spawn, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def _spawn(self, callback: TickCallback) -> None:
        task = asyncio.ensure_future(callback())
        self._tasks.add(task)
        task.add_done_callback(self._done)

    def _done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logging.error(f"Tick failed: {task.exception()!r}")
