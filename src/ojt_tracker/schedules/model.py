from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import DEFAULT_REQUIRED_HOURS, DEFAULT_SCHEDULED_TIME_IN, DEFAULT_SCHEDULED_TIME_OUT


@dataclass(frozen=True)
class ScheduleConfig:
    """Per-user official time frame and required-hours target.

    ``imported_rendered_minutes`` is a carry-over from an earlier system;
    it is added to computed totals and never changed by clock events.
    """

    user_id: str
    scheduled_time_in: time = DEFAULT_SCHEDULED_TIME_IN
    scheduled_time_out: time = DEFAULT_SCHEDULED_TIME_OUT
    required_hours: float = DEFAULT_REQUIRED_HOURS
    schedule_configured_at: Optional[datetime] = None
    imported_rendered_minutes: int = 0

    @property
    def is_configured(self) -> bool:
        return self.schedule_configured_at is not None

    @property
    def required_seconds(self) -> int:
        return int(round(float(self.required_hours) * 3600))

    @classmethod
    def default(cls, user_id: str) -> "ScheduleConfig":
        return cls(user_id=str(user_id))
