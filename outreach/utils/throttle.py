# ==============================================================================
# Leading-Edge Throttle
# ==============================================================================
"""
Throttle wrapper for high-frequency input handlers.

The first call goes through immediately; further calls are dropped until
``interval_seconds`` have passed on the supplied clock.
"""

from collections.abc import Callable
from typing import Any


class Throttle:
    """Call *func* at most once per *interval_seconds*.

    Args:
        func: Handler to protect.
        interval_seconds: Minimum spacing between forwarded calls.
        clock: Monotonic clock returning seconds.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        interval_seconds: float,
        clock: Callable[[], float],
    ) -> None:
        self._func = func
        self._interval = interval_seconds
        self._clock = clock
        self._last_call: float | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> bool:
        """Forward the call unless throttled.

        Returns:
            True if *func* was invoked, False if the call was dropped.
        """
        now = self._clock()
        if self._last_call is not None and now - self._last_call < self._interval:
            return False
        self._last_call = now
        self._func(*args, **kwargs)
        return True
