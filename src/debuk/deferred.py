"""Deferred task queue.

Work scheduled here runs after the current synchronous call chain unwinds.
Inside a running asyncio event loop that is ``loop.call_soon``. Without a
loop, tasks wait in an explicit FIFO queue until ``run_deferred()`` drains
it, or until interpreter exit.
"""

from __future__ import annotations

import asyncio
import atexit
from collections import deque
from collections.abc import Callable
from typing import Any

import anyio.lowlevel

from debuk.utilities.logging import get_logger

logger = get_logger(__name__)


class DeferredQueue:
    """Schedules callbacks to run once the current synchronous turn is over."""

    def __init__(self) -> None:
        self._tasks: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._drain_at_exit = False

    def __len__(self) -> int:
        return len(self._tasks)

    @staticmethod
    def on_event_loop() -> bool:
        """Whether ``schedule`` would hand callbacks to a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._tasks.append((callback, args))
            if not self._drain_at_exit:
                atexit.register(self.run)
                self._drain_at_exit = True
            return
        loop.call_soon(callback, *args)

    def run(self) -> int:
        """Run queued tasks in order, including tasks queued while running.

        Returns:
            The number of tasks that ran.
        """
        ran = 0
        while self._tasks:
            callback, args = self._tasks.popleft()
            callback(*args)
            ran += 1
        if ran:
            logger.debug("Ran %d deferred task(s)", ran)
        return ran

    def clear(self) -> None:
        """Drop queued tasks without running them."""
        self._tasks.clear()


_default_queue = DeferredQueue()


def get_deferred_queue() -> DeferredQueue:
    """Get the process-wide deferred queue."""
    return _default_queue


def run_deferred() -> int:
    """Drain the process-wide deferred queue; see ``DeferredQueue.run``."""
    return _default_queue.run()


async def checkpoint() -> None:
    """Drain the deferred queue and yield once to the event loop.

    After this returns, every flush scheduled before the call has run.
    """
    _default_queue.run()
    await anyio.lowlevel.checkpoint()
