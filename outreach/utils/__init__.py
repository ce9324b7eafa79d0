# ==============================================================================
# Utilities
# ==============================================================================
"""
Shared helpers: configuration, retry decorators, rate limiting and throttling.
"""

from outreach.utils.config import Settings, get_settings
from outreach.utils.rate_limiter import SlidingWindowRateLimiter
from outreach.utils.throttle import Throttle

__all__ = [
    "Settings",
    "SlidingWindowRateLimiter",
    "Throttle",
    "get_settings",
]
