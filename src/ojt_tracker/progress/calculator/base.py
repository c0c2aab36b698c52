from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from ...attendance.model import AttendanceLog
from ...schedules.model import ScheduleConfig


class RenderedHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for rendered hours)."""

    @abstractmethod
    def rendered_seconds(self, logs: Sequence[AttendanceLog], schedule: ScheduleConfig, *, now: datetime) -> int:
        raise NotImplementedError

    def remaining_seconds(self, rendered: int, schedule: ScheduleConfig) -> int:
        return max(0, schedule.required_seconds - int(rendered))
