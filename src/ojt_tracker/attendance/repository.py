from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceLog, Segment


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        raise NotImplementedError

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
        """Create or update the (user, date) log and return the stored record.

        ``expected_version`` is None to create; otherwise the write only
        applies when the stored version still matches. Raises
        ``ConcurrentUpdateError`` when it does not (or when a create finds an
        existing row).
        """

        raise NotImplementedError

    def list_logs(
        self,
        *,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceLog]:
        """Logs ordered by log_date descending; all users when user_id is None."""

        raise NotImplementedError
