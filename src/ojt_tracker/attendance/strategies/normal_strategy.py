from __future__ import annotations

from datetime import datetime

from ...core.enums import ArrivalStatus
from ...schedules.model import ScheduleConfig
from .base import ArrivalDecision, ArrivalStrategy


class OnTimeStrategy(ArrivalStrategy):
    """Clock-in before the scheduled start."""

    def decide_arrival(self, *, now: datetime, schedule: ScheduleConfig, grace_minutes: int) -> ArrivalDecision:
        return ArrivalDecision(
            status=ArrivalStatus.ON_TIME,
            is_late=False,
            grace_notified=False,
            message="Time in recorded.",
        )
