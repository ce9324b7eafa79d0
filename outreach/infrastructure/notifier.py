# ==============================================================================
# Notifier Implementations
# ==============================================================================
"""
Notifier that routes user notifications to the application log.
"""

import logging

from outreach.base.notifier import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    """Logs notifications; used when no interactive front-end is attached."""

    def notify(self, title: str, message: str) -> None:
        logger.info("%s: %s", title, message)
