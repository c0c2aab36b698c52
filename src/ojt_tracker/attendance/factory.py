from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import minutes_since_midnight
from ..schedules.model import ScheduleConfig
from .strategies.base import ArrivalStrategy
from .strategies.grace_strategy import GraceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import OnTimeStrategy


@dataclass
class ArrivalStrategyFactory:
    """Factory Pattern: choose the arrival strategy from minutes since midnight."""

    def for_clock_in(self, *, now: datetime, schedule: ScheduleConfig, grace_minutes: int) -> ArrivalStrategy:
        scheduled = minutes_since_midnight(schedule.scheduled_time_in)
        arrived = minutes_since_midnight(now)

        if arrived < scheduled:
            return OnTimeStrategy()
        if arrived < scheduled + grace_minutes:
            return GraceStrategy()
        return LateStrategy()
