# ==============================================================================
# Sliding Window Rate Limiter
# ==============================================================================
"""
Sliding window rate limiter for user-triggered actions.

Each action key keeps the timestamps of its recent attempts.  Timestamps
that fall out of the window are pruned lazily on the next check for that
key, and a key whose window is empty is dropped from the map.

Not safe for concurrent use from multiple threads; it is meant to be driven
from the single thread that dispatches user actions.

Usage::

    limiter = SlidingWindowRateLimiter(max_actions=5, window_seconds=60)
    if not limiter.check_limit("send_campaign"):
        return  # too many attempts
"""

import time
from collections.abc import Callable


class SlidingWindowRateLimiter:
    """Per-key rate limiter using a sliding window of timestamps.

    Args:
        max_actions: Actions allowed per key within one window.
        window_seconds: Window length in seconds.
        clock: Monotonic clock returning seconds.  Defaults to
            ``time.monotonic``; inject a scheduler clock for tests.
    """

    def __init__(
        self,
        max_actions: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_actions <= 0:
            raise ValueError(f"max_actions must be positive, got {max_actions}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")

        self.max_actions = max_actions
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._actions: dict[str, list[float]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_limit(self, key: str) -> bool:
        """Record an attempt for *key* if it is within the limit.

        Returns:
            True if the action is allowed (and recorded), False if the key
            has already used up its window.
        """
        now = self._clock()
        recent = self._prune(key, now)

        if len(recent) >= self.max_actions:
            return False

        recent.append(now)
        self._actions[key] = recent
        return True

    def remaining(self, key: str) -> int:
        """Number of actions *key* may still perform in the current window."""
        recent = self._prune(key, self._clock())
        return max(self.max_actions - len(recent), 0)

    def reset(self, key: str | None = None) -> None:
        """Forget recorded attempts for *key*, or for every key."""
        if key is None:
            self._actions.clear()
        else:
            self._actions.pop(key, None)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _prune(self, key: str, now: float) -> list[float]:
        """Drop timestamps outside the window and return what is left.

        A key with nothing left in its window is removed from the map.
        """
        window_start = now - self.window_seconds
        recent = [t for t in self._actions.get(key, []) if t > window_start]
        if recent:
            self._actions[key] = recent
        else:
            self._actions.pop(key, None)
        return recent
