from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.exceptions import ConcurrentUpdateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceLog, Segment
from .repository import AttendanceRepository

_COLUMNS = (
    "log_id, user_id, log_date, segments, total_rendered_seconds, "
    "is_late, grace_period_notified, version, updated_at"
)


def segments_to_json(segments: Sequence[Segment]) -> str:
    return json.dumps(
        [
            {
                "time_in": s.time_in.isoformat(),
                "time_out": s.time_out.isoformat() if s.time_out else None,
            }
            for s in segments
        ]
    )


def segments_from_json(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    items = json.loads(value) if isinstance(value, str) else value
    return tuple(
        Segment(
            time_in=datetime.fromisoformat(item["time_in"]),
            time_out=datetime.fromisoformat(item["time_out"]) if item.get("time_out") else None,
        )
        for item in items
    )


def _row_to_log(r: Dict[str, Any]) -> AttendanceLog:
    return AttendanceLog(
        user_id=str(r["user_id"]),
        log_date=r["log_date"],
        segments=segments_from_json(r.get("segments")),
        total_rendered_seconds=int(r.get("total_rendered_seconds") or 0),
        is_late=bool(r.get("is_late")),
        grace_notified=bool(r.get("grace_period_notified")),
        version=int(r.get("version") or 0),
        updated_at=r.get("updated_at"),
        log_id=int(r["log_id"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs WHERE user_id=%s AND log_date=%s",
                (str(user_id), log_date),
            )
            r = fetchone(cur)
            return _row_to_log(r) if r else None

    def upsert_log(
        self,
        *,
        user_id: str,
        log_date: date,
        segments: Sequence[Segment],
        total_rendered_seconds: int,
        is_late: bool,
        grace_notified: bool,
        expected_version: Optional[int],
    ) -> AttendanceLog:
        payload = segments_to_json(segments)
        now = datetime.now()

        with db_cursor(self._conn_factory) as (_, cur):
            if expected_version is None:
                try:
                    cur.execute(
                        """
                        INSERT INTO attendance_logs(
                            user_id, log_date, segments, total_rendered_seconds,
                            is_late, grace_period_notified, version, updated_at
                        )
                        VALUES(%s,%s,%s,%s,%s,%s,1,%s)
                        """,
                        (str(user_id), log_date, payload, int(total_rendered_seconds),
                         int(bool(is_late)), int(bool(grace_notified)), now),
                    )
                except mysql.connector.IntegrityError as exc:
                    raise ConcurrentUpdateError("Attendance log already exists for this date") from exc
            else:
                cur.execute(
                    """
                    UPDATE attendance_logs
                    SET segments=%s, total_rendered_seconds=%s, is_late=%s,
                        grace_period_notified=%s, version=version+1, updated_at=%s
                    WHERE user_id=%s AND log_date=%s AND version=%s
                    """,
                    (payload, int(total_rendered_seconds), int(bool(is_late)), int(bool(grace_notified)),
                     now, str(user_id), log_date, int(expected_version)),
                )
                if cur.rowcount == 0:
                    raise ConcurrentUpdateError("Attendance log was changed by another session")

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs WHERE user_id=%s AND log_date=%s",
                (str(user_id), log_date),
            )
            return _row_to_log(fetchone(cur))

    def list_logs(
        self,
        *,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        where = []
        params: list = []
        if user_id is not None:
            where.append("user_id=%s")
            params.append(str(user_id))
        if start_date is not None:
            where.append("log_date >= %s")
            params.append(start_date)
        if end_date is not None:
            where.append("log_date <= %s")
            params.append(end_date)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs {where_sql} ORDER BY log_date DESC, user_id DESC",
                tuple(params),
            )
            return [_row_to_log(r) for r in fetchall(cur)]
