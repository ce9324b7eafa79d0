# ==============================================================================
# Input Signal Bus
# ==============================================================================
"""
In-process bus for user input signals.

Front-ends translate raw input (pointer, keyboard, scroll, touch) into
InputSignal values and dispatch them here; session and activity components
register listeners instead of hooking the input source directly.
"""

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class InputSignal(str, Enum):
    """Input signal types that count as user activity."""

    POINTER_DOWN = "mousedown"
    POINTER_MOVE = "mousemove"
    KEY_PRESS = "keypress"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"


SignalListener = Callable[[InputSignal], object]


class SignalBus:
    """Registry of listeners per input signal type."""

    def __init__(self) -> None:
        self._listeners: dict[InputSignal, list[SignalListener]] = {s: [] for s in InputSignal}

    def add_listener(self, signal: InputSignal, listener: SignalListener) -> None:
        """Register *listener* for *signal*. Registering twice is a no-op."""
        listeners = self._listeners[signal]
        if listener not in listeners:
            listeners.append(listener)

    def remove_listener(self, signal: InputSignal, listener: SignalListener) -> None:
        """Unregister *listener*; unknown listeners are ignored."""
        listeners = self._listeners[signal]
        if listener in listeners:
            listeners.remove(listener)

    def dispatch(self, signal: InputSignal) -> int:
        """
        Deliver *signal* to its listeners in registration order.

        Returns:
            Number of listeners invoked
        """
        listeners = list(self._listeners[signal])
        for listener in listeners:
            listener(signal)
        return len(listeners)

    def listener_count(self, signal: InputSignal | None = None) -> int:
        """Count listeners for one signal, or across all signals."""
        if signal is not None:
            return len(self._listeners[signal])
        return sum(len(listeners) for listeners in self._listeners.values())
