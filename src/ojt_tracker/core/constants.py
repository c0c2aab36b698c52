"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_SCHEDULED_TIME_IN = time(9, 0)
DEFAULT_SCHEDULED_TIME_OUT = time(18, 0)
DEFAULT_REQUIRED_HOURS = 400
DEFAULT_GRACE_MINUTES = 15

DEFAULT_CACHE_TTL_MS = 2 * 60 * 1000
