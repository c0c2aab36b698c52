from __future__ import annotations

from datetime import datetime

from ...core.enums import ArrivalStatus
from ...schedules.model import ScheduleConfig
from .base import ArrivalDecision, ArrivalStrategy


class LateStrategy(ArrivalStrategy):
    """Clock-in at or after the end of the grace window."""

    def decide_arrival(self, *, now: datetime, schedule: ScheduleConfig, grace_minutes: int) -> ArrivalDecision:
        return ArrivalDecision(
            status=ArrivalStatus.LATE,
            is_late=True,
            grace_notified=False,
            message="You are marked late. Please inform your supervisor or TL.",
        )
