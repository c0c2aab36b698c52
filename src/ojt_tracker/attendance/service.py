from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from ..cache import keys
from ..cache.query_cache import QueryCache
from ..common.datetime_utils import format_elapsed, format_hours, now_local
from ..common.locks import UserLocks
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.exceptions import AlreadyClockedInError, ConcurrentUpdateError, NotClockedInError, PersistenceError
from ..schedules.model import ScheduleConfig
from ..schedules.service import ScheduleService
from .factory import ArrivalStrategyFactory
from .model import AttendanceLog, Segment
from .repository import AttendanceRepository
from .strategies.base import ArrivalDecision
from .timekeeping import aggregate_rendered_seconds, remaining_seconds, rendered_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockInResult:
    log: AttendanceLog
    # Only set on the first clock-in of the day, when lateness is decided.
    arrival: Optional[ArrivalDecision] = None

    @property
    def message(self) -> str:
        return self.arrival.message if self.arrival else "Time in recorded."


@dataclass(frozen=True)
class AttendanceSummary:
    """Dashboard read-model; time values are correct as of ``as_of`` only."""

    user_id: str
    as_of: datetime
    schedule: ScheduleConfig
    today_log: Optional[AttendanceLog]
    today_rendered_seconds: int
    rendered_seconds: int
    remaining_seconds: int

    @property
    def is_clocked_in(self) -> bool:
        return bool(self.today_log and self.today_log.is_clocked_in)

    def to_dict(self) -> dict:
        log = self.today_log
        last = log.last_segment if log else None
        return {
            "user_id": self.user_id,
            "as_of": self.as_of.isoformat(),
            "schedule": {
                "scheduled_time_in": self.schedule.scheduled_time_in.strftime("%H:%M"),
                "scheduled_time_out": self.schedule.scheduled_time_out.strftime("%H:%M"),
                "required_hours": self.schedule.required_hours,
                "is_configured": self.schedule.is_configured,
            },
            "today": log_to_dict(log) if log else None,
            "is_clocked_in": self.is_clocked_in,
            "open_segment_started_at": last.time_in.isoformat() if last and last.is_open else None,
            "today_elapsed": format_elapsed(self.today_rendered_seconds),
            "rendered_seconds": self.rendered_seconds,
            "remaining_seconds": self.remaining_seconds,
            "rendered_hours": format_hours(self.rendered_seconds),
            "remaining_hours": format_hours(self.remaining_seconds),
        }


def log_to_dict(log: AttendanceLog) -> dict:
    return {
        "user_id": log.user_id,
        "log_date": log.log_date.isoformat(),
        "segments": [
            {
                "time_in": s.time_in.isoformat(),
                "time_out": s.time_out.isoformat() if s.time_out else None,
            }
            for s in log.segments
        ],
        "total_rendered_seconds": log.total_rendered_seconds,
        "is_late": log.is_late,
        "grace_notified": log.grace_notified,
    }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleService,
        *,
        cache: Optional[QueryCache] = None,
        strategy_factory: Optional[ArrivalStrategyFactory] = None,
        grace_minutes: int = DEFAULT_GRACE_MINUTES,
        locks: Optional[UserLocks] = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._cache = cache
        self._factory = strategy_factory or ArrivalStrategyFactory()
        self._grace_minutes = int(grace_minutes)
        self._locks = locks or UserLocks()

    def clock_in(self, user_id: str, *, now: Optional[datetime] = None) -> ClockInResult:
        user_id = str(user_id)
        with self._locks.hold(user_id):
            now = now or now_local()
            today = now.date()

            log = self._attendance.get_for_user_and_date(user_id, today)
            if log is not None and log.is_clocked_in:
                raise AlreadyClockedInError("You are already timed in")

            arrival = None
            if log is None:
                schedule = self._schedules.get_schedule(user_id)
                strategy = self._factory.for_clock_in(now=now, schedule=schedule, grace_minutes=self._grace_minutes)
                arrival = strategy.decide_arrival(now=now, schedule=schedule, grace_minutes=self._grace_minutes)
                segments = (Segment(time_in=now),)
                total = 0
                is_late, grace_notified = arrival.is_late, arrival.grace_notified
                expected_version = None
            else:
                # Lateness was fixed by the first clock-in of the day.
                segments = log.segments + (Segment(time_in=now),)
                total = log.total_rendered_seconds
                is_late, grace_notified = log.is_late, log.grace_notified
                expected_version = log.version

            saved = self._write(
                user_id=user_id,
                log_date=today,
                segments=segments,
                total_rendered_seconds=total,
                is_late=is_late,
                grace_notified=grace_notified,
                expected_version=expected_version,
            )

        logger.info(
            "clock in user=%s date=%s segment=%d late=%s grace=%s",
            user_id, today, len(saved.segments), saved.is_late, saved.grace_notified,
        )
        return ClockInResult(log=saved, arrival=arrival)

    def clock_out(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceLog:
        user_id = str(user_id)
        with self._locks.hold(user_id):
            now = now or now_local()
            today = now.date()

            log = self._attendance.get_for_user_and_date(user_id, today)
            if log is None or not log.is_clocked_in:
                raise NotClockedInError("No time in recorded for today")

            closed = log.last_segment.closed_at(now)
            saved = self._write(
                user_id=user_id,
                log_date=today,
                segments=log.segments[:-1] + (closed,),
                total_rendered_seconds=log.total_rendered_seconds + closed.duration_seconds(),
                is_late=log.is_late,
                grace_notified=log.grace_notified,
                expected_version=log.version,
            )

        logger.info(
            "clock out user=%s date=%s segment_seconds=%d total_seconds=%d",
            user_id, today, closed.duration_seconds(), saved.total_rendered_seconds,
        )
        return saved

    def is_busy(self, user_id: str) -> bool:
        """True while a clock operation for this user is in flight."""
        return self._locks.is_held(str(user_id))

    def get_logs(self, user_id: str) -> List[AttendanceLog]:
        """Logs for one user, newest first. Callers get their own list; the cache keeps a tuple."""
        user_id = str(user_id)
        if self._cache is None:
            return list(self._attendance.list_logs(user_id=user_id))
        cached = self._cache.get_or_load(
            keys.attendance_key(user_id),
            lambda: tuple(self._attendance.list_logs(user_id=user_id)),
        )
        return list(cached)

    def get_all_logs(self) -> List[AttendanceLog]:
        if self._cache is None:
            return list(self._attendance.list_logs())
        return list(self._cache.get_or_load(keys.ALL_ATTENDANCE, lambda: tuple(self._attendance.list_logs())))

    def get_summary(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceSummary:
        user_id = str(user_id)
        now = now or now_local()
        today = now.date()

        schedule = self._schedules.get_schedule(user_id)
        logs = self.get_logs(user_id)
        today_log = next((log for log in logs if log.log_date == today), None)

        rendered = aggregate_rendered_seconds(logs, schedule.imported_rendered_minutes, now=now, today=today)
        return AttendanceSummary(
            user_id=user_id,
            as_of=now,
            schedule=schedule,
            today_log=today_log,
            today_rendered_seconds=rendered_seconds(today_log, now),
            rendered_seconds=rendered,
            remaining_seconds=remaining_seconds(schedule.required_hours, rendered),
        )

    def _write(self, *, user_id: str, log_date: date, expected_version: Optional[int], **fields) -> AttendanceLog:
        try:
            saved = self._attendance.upsert_log(
                user_id=user_id,
                log_date=log_date,
                expected_version=expected_version,
                **fields,
            )
        except ConcurrentUpdateError as exc:
            self._invalidate(user_id)
            try:
                current = self._attendance.get_for_user_and_date(user_id, log_date)
            except PersistenceError:
                logger.warning("re-read after rejected write failed user=%s date=%s", user_id, log_date, exc_info=True)
                current = None
            logger.warning("stale attendance write rejected user=%s date=%s", user_id, log_date)
            raise ConcurrentUpdateError(str(exc), current=current) from exc

        self._invalidate(user_id)
        return saved

    def _invalidate(self, user_id: str) -> None:
        if self._cache is None:
            return
        self._cache.invalidate(keys.attendance_key(user_id))
        self._cache.invalidate(keys.ALL_ATTENDANCE)
