from __future__ import annotations

from datetime import datetime, timedelta

from ...core.enums import ArrivalStatus
from ...schedules.model import ScheduleConfig
from .base import ArrivalDecision, ArrivalStrategy


class GraceStrategy(ArrivalStrategy):
    """Clock-in inside the grace window: flagged, not late."""

    def decide_arrival(self, *, now: datetime, schedule: ScheduleConfig, grace_minutes: int) -> ArrivalDecision:
        start = datetime.combine(now.date(), schedule.scheduled_time_in)
        end = start + timedelta(minutes=grace_minutes)
        return ArrivalDecision(
            status=ArrivalStatus.GRACE,
            is_late=False,
            grace_notified=True,
            message=(
                f"You are within the grace period ({start:%H:%M}-{end:%H:%M}). "
                "Please message your supervisor or TL if needed."
            ),
        )
