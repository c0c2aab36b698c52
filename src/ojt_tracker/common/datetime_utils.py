from __future__ import annotations

import math
from datetime import datetime, time


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_clock_time(value) -> time:
    """Parse ``H:MM``, ``HH:MM`` or ``HH:MM:SS`` into a time of day."""
    if isinstance(value, time):
        return value
    parts = str(value).strip().split(":")
    if len(parts) < 2 or len(parts) > 3:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0] or 0)
    minutes = int(parts[1] or 0)
    seconds = int(parts[2] or 0) if len(parts) == 3 else 0
    return time(hour=hours, minute=minutes, second=seconds)


def minutes_since_midnight(value) -> int:
    """Whole minutes since midnight; seconds are ignored."""
    return value.hour * 60 + value.minute


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, floored and never negative."""
    return max(0, math.floor((end - start).total_seconds()))


def format_elapsed(seconds: int) -> str:
    """Render a second count as zero-padded HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_hours(seconds: int) -> str:
    """Render a second count as decimal hours with two places (e.g. ``8.50``)."""
    return f"{max(0, int(seconds)) / 3600:.2f}"
