from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...attendance.model import AttendanceLog
from ...attendance.timekeeping import aggregate_rendered_seconds
from ...schedules.model import ScheduleConfig
from .base import RenderedHoursCalculator


class StandardRenderedHoursCalculator(RenderedHoursCalculator):
    """Standard rule: closed segments, today's open segment, plus imported minutes."""

    def rendered_seconds(self, logs: Sequence[AttendanceLog], schedule: ScheduleConfig, *, now: datetime) -> int:
        return aggregate_rendered_seconds(logs, schedule.imported_rendered_minutes, now=now)
