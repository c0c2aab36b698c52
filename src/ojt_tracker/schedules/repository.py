from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Protocol, Sequence

from .model import ScheduleConfig


class ScheduleRepository(Protocol):
    def get_for_user(self, user_id: str) -> Optional[ScheduleConfig]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: str,
        scheduled_time_in: time,
        scheduled_time_out: time,
        required_hours: float,
        schedule_configured_at: Optional[datetime],
        imported_rendered_minutes: int,
    ) -> ScheduleConfig:
        """Create or replace the user's schedule and return the stored record."""

        raise NotImplementedError

    def list_all(self) -> Sequence[ScheduleConfig]:
        """All stored schedules ordered by user_id."""

        raise NotImplementedError
