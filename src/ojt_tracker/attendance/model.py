from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import elapsed_seconds


@dataclass(frozen=True)
class Segment:
    """One continuous clock-in to clock-out interval; open while ``time_out`` is None."""

    time_in: datetime
    time_out: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    def closed_at(self, time_out: datetime) -> "Segment":
        return Segment(time_in=self.time_in, time_out=time_out)

    def duration_seconds(self) -> int:
        if self.time_out is None:
            return 0
        return elapsed_seconds(self.time_in, self.time_out)


@dataclass(frozen=True)
class AttendanceLog:
    """Domain entity: one attendance log per (user, calendar date).

    ``total_rendered_seconds`` covers closed segments only; the open tail
    segment, if any, is added at read time.
    """

    user_id: str
    log_date: date
    segments: Tuple[Segment, ...] = ()
    total_rendered_seconds: int = 0
    is_late: bool = False
    grace_notified: bool = False
    version: int = 0
    updated_at: Optional[datetime] = None
    log_id: Optional[int] = field(default=None, compare=False)

    @property
    def last_segment(self) -> Optional[Segment]:
        return self.segments[-1] if self.segments else None

    @property
    def is_clocked_in(self) -> bool:
        last = self.last_segment
        return last is not None and last.is_open

    def has_valid_segments(self) -> bool:
        """Only the last segment may be open."""
        return all(not s.is_open for s in self.segments[:-1])
