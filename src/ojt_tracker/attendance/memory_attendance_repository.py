from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Optional, Sequence, Tuple

from ..core.exceptions import ConcurrentUpdateError
from .model import AttendanceLog, Segment
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store used by the ``memory`` backend and by tests."""

    def __init__(self, *, clock=datetime.now):
        self._by_user_date: Dict[Tuple[str, date], AttendanceLog] = {}
        self._next_id = 0
        self._lock = threading.Lock()
        self._clock = clock

    def get_for_user_and_date(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        with self._lock:
            return self._by_user_date.get((str(user_id), log_date))

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
        key = (str(user_id), log_date)
        with self._lock:
            existing = self._by_user_date.get(key)
            if expected_version is None:
                if existing is not None:
                    raise ConcurrentUpdateError("Attendance log already exists for this date")
                self._next_id += 1
                log = AttendanceLog(
                    user_id=str(user_id),
                    log_date=log_date,
                    segments=tuple(segments),
                    total_rendered_seconds=int(total_rendered_seconds),
                    is_late=bool(is_late),
                    grace_notified=bool(grace_notified),
                    version=1,
                    updated_at=self._clock(),
                    log_id=self._next_id,
                )
            else:
                if existing is None or existing.version != expected_version:
                    raise ConcurrentUpdateError("Attendance log was changed by another session")
                log = replace(
                    existing,
                    segments=tuple(segments),
                    total_rendered_seconds=int(total_rendered_seconds),
                    is_late=bool(is_late),
                    grace_notified=bool(grace_notified),
                    version=existing.version + 1,
                    updated_at=self._clock(),
                )
            self._by_user_date[key] = log
            return log

    def list_logs(
        self,
        *,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        with self._lock:
            items = list(self._by_user_date.values())
        if user_id is not None:
            items = [log for log in items if log.user_id == str(user_id)]
        if start_date is not None:
            items = [log for log in items if log.log_date >= start_date]
        if end_date is not None:
            items = [log for log in items if log.log_date <= end_date]
        items.sort(key=lambda log: (log.log_date, log.user_id), reverse=True)
        return items
