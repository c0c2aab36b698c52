from __future__ import annotations

from datetime import datetime, time
from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_SCHEDULED_TIME_IN, DEFAULT_SCHEDULED_TIME_OUT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ScheduleConfig
from .repository import ScheduleRepository

_COLUMNS = (
    "user_id, scheduled_time_in, scheduled_time_out, required_hours, "
    "schedule_configured_at, imported_rendered_minutes"
)


def _row_to_schedule(r: Dict[str, Any]) -> ScheduleConfig:
    return ScheduleConfig(
        user_id=str(r["user_id"]),
        scheduled_time_in=normalize_mysql_time(r.get("scheduled_time_in")) or DEFAULT_SCHEDULED_TIME_IN,
        scheduled_time_out=normalize_mysql_time(r.get("scheduled_time_out")) or DEFAULT_SCHEDULED_TIME_OUT,
        required_hours=float(r["required_hours"]),
        schedule_configured_at=r.get("schedule_configured_at"),
        imported_rendered_minutes=int(r.get("imported_rendered_minutes") or 0),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: str) -> Optional[ScheduleConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_schedules WHERE user_id=%s", (str(user_id),))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_schedules(
                    user_id, scheduled_time_in, scheduled_time_out, required_hours,
                    schedule_configured_at, imported_rendered_minutes
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    scheduled_time_in=VALUES(scheduled_time_in),
                    scheduled_time_out=VALUES(scheduled_time_out),
                    required_hours=VALUES(required_hours),
                    schedule_configured_at=VALUES(schedule_configured_at),
                    imported_rendered_minutes=VALUES(imported_rendered_minutes)
                """,
                (str(user_id), scheduled_time_in, scheduled_time_out, float(required_hours),
                 schedule_configured_at, int(imported_rendered_minutes)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM user_schedules WHERE user_id=%s", (str(user_id),))
            return _row_to_schedule(fetchone(cur))

    def list_all(self) -> Sequence[ScheduleConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_schedules ORDER BY user_id")
            return [_row_to_schedule(r) for r in fetchall(cur)]
