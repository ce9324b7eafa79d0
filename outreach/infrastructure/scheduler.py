# ==============================================================================
# Asyncio Scheduler Implementation
# ==============================================================================
"""
Scheduler backed by an asyncio event loop.

Timers map onto loop.call_later().  Background work runs in the loop's
default executor so blocking remote calls (requests, psycopg2) never hold
up the loop; their completion is not awaited by the caller, and failures
are logged from a done-callback.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from outreach.base.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class AsyncioTimerHandle(TimerHandle):
    """Wraps an asyncio.TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Asyncio implementation of the Scheduler interface.

    Must be created and used on the thread running the event loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """
        Initialize the scheduler.

        Args:
            loop: Event loop to schedule on. If None, the running loop is used.
        """
        self._loop = loop or asyncio.get_running_loop()
        self._pending: set[asyncio.Future] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> AsyncioTimerHandle:
        return AsyncioTimerHandle(self._loop.call_later(max(delay, 0.0), callback))

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        future = self._loop.run_in_executor(None, partial(fn, *args))
        self._pending.add(future)
        future.add_done_callback(self._on_done)

    async def drain(self, timeout: float | None = None) -> None:
        """
        Wait for background work submitted so far.

        Args:
            timeout: Maximum seconds to wait (None waits indefinitely)
        """
        if not self._pending:
            return
        done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            logger.warning("%d background calls still running after drain", len(not_done))

    def _on_done(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Background call failed: %s", exc, exc_info=exc)
