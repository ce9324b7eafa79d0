# ==============================================================================
# Notifier Abstract Base Class
# ==============================================================================
"""
Abstract interface for user-visible notifications (session warnings,
session extension confirmations).
"""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Shows short messages to the signed-in user."""

    @abstractmethod
    def notify(self, title: str, message: str) -> None:
        """
        Show a notification.

        Args:
            title: Short heading (e.g. "Session Warning")
            message: Body text
        """
        ...
