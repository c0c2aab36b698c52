"""Rendered-time arithmetic over attendance logs.

All functions are pure. Values that include an open segment change every
second, so callers recompute them on each display tick instead of storing
them.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import elapsed_seconds, format_elapsed
from .model import AttendanceLog


def rendered_seconds(log: Optional[AttendanceLog], now_if_open: Optional[datetime] = None) -> int:
    if log is None:
        return 0
    total = int(log.total_rendered_seconds)
    last = log.last_segment
    if last is not None and last.is_open and now_if_open is not None:
        total += elapsed_seconds(last.time_in, now_if_open)
    return total


def aggregate_rendered_seconds(
    logs: Iterable[AttendanceLog],
    imported_rendered_minutes: int = 0,
    *,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> int:
    """Sum of rendered time across logs plus the imported carry-over.

    Only the log dated ``today`` (defaults to ``now.date()``) counts its open
    segment; an open segment left on an earlier day contributes nothing
    beyond its closed total.
    """
    if today is None and now is not None:
        today = now.date()

    total = 0
    for log in logs:
        now_if_open = now if (today is not None and log.log_date == today) else None
        total += rendered_seconds(log, now_if_open)
    return total + int(imported_rendered_minutes or 0) * 60


def remaining_seconds(required_hours, rendered: int) -> int:
    return max(0, int(round(float(required_hours) * 3600)) - int(rendered))


def live_elapsed(log: Optional[AttendanceLog], now: datetime) -> str:
    """Today's rendered time as HH:MM:SS for the ticking display."""
    return format_elapsed(rendered_seconds(log, now))
