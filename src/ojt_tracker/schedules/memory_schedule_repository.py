from __future__ import annotations

import threading
from datetime import datetime, time
from typing import Dict, Optional, Sequence

from .model import ScheduleConfig
from .repository import ScheduleRepository


class InMemoryScheduleRepository(ScheduleRepository):
    def __init__(self, schedules: Optional[Sequence[ScheduleConfig]] = None):
        self._lock = threading.Lock()
        self._by_user: Dict[str, ScheduleConfig] = {s.user_id: s for s in (schedules or [])}

    def get_for_user(self, user_id: str) -> Optional[ScheduleConfig]:
        with self._lock:
            return self._by_user.get(str(user_id))

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
        schedule = ScheduleConfig(
            user_id=str(user_id),
            scheduled_time_in=scheduled_time_in,
            scheduled_time_out=scheduled_time_out,
            required_hours=required_hours,
            schedule_configured_at=schedule_configured_at,
            imported_rendered_minutes=int(imported_rendered_minutes),
        )
        with self._lock:
            self._by_user[schedule.user_id] = schedule
        return schedule

    def list_all(self) -> Sequence[ScheduleConfig]:
        with self._lock:
            return sorted(self._by_user.values(), key=lambda s: s.user_id)
