"""Batched invocation counts.

Calls recorded during one synchronous burst are coalesced per display name
and reported to the console once, from a deferred flush.
"""

from __future__ import annotations

from typing import Any

from debuk.deferred import DeferredQueue, get_deferred_queue
from debuk.utilities.logging import get_logger

logger = get_logger(__name__)


class CountAggregator:
    """Ledger of pending call counts keyed by display name.

    A name holds an entry only while a flush is scheduled for it; the flush
    reports the total and removes the entry, so a zero count is never
    reported.
    """

    def __init__(self, queue: DeferredQueue | None = None) -> None:
        self._queue = queue if queue is not None else get_deferred_queue()
        self._pending: dict[str, int] = {}
        # Console each scheduled flush reports to; presence means "flush scheduled".
        self._scheduled: dict[str, Any] = {}
        # Names whose scheduled flush sits on an event loop rather than the explicit queue.
        self._on_loop: set[str] = set()

    def record(self, name: str, backend: Any) -> None:
        self._pending[name] = self._pending.get(name, 0) + 1
        on_loop = self._queue.on_event_loop()
        if name in self._scheduled and (name in self._on_loop or not on_loop):
            return
        # An explicit-queue flush waits for run_deferred(); add a loop flush too.
        # Whichever runs second finds nothing pending.
        self._scheduled.setdefault(name, backend)
        if on_loop:
            self._on_loop.add(name)
        self._queue.schedule(self._flush, name)

    def _flush(self, name: str) -> None:
        backend = self._scheduled.pop(name, None)
        self._on_loop.discard(name)
        total = self._pending.pop(name, 0)
        if backend is None or total == 0:
            # Already flushed explicitly or reset.
            return
        logger.debug("Flushing %d call(s) for %s", total, name)
        backend.count(name, total)

    def flush(self) -> None:
        """Report every pending count now instead of waiting for the deferred flush."""
        for name in list(self._scheduled):
            self._flush(name)

    def pending(self) -> dict[str, int]:
        return dict(self._pending)

    def reset(self) -> None:
        """Forget every pending count without reporting it."""
        self._pending.clear()
        self._scheduled.clear()
        self._on_loop.clear()


_default_aggregator = CountAggregator()


def get_aggregator() -> CountAggregator:
    """Get the process-wide aggregator shared by every wrapped unit."""
    return _default_aggregator
