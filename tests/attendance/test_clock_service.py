from __future__ import annotations

import threading
from datetime import date, datetime, time, timedelta

import pytest

from ojt_tracker.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from ojt_tracker.attendance.model import Segment
from ojt_tracker.attendance.service import AttendanceService
from ojt_tracker.cache import keys
from ojt_tracker.core.enums import ArrivalStatus
from ojt_tracker.core.exceptions import (
    AlreadyClockedInError,
    ConcurrentUpdateError,
    NotClockedInError,
    OperationInProgressError,
    PersistenceError,
)

DAY = date(2026, 2, 2)


def at(hour: int, minute: int = 0, second: int = 0, microsecond: int = 0) -> datetime:
    return datetime(2026, 2, 2, hour, minute, second, microsecond)


def test_first_clock_in_creates_log_with_open_segment(attendance_service, attendance_repo):
    result = attendance_service.clock_in("u1", now=at(8, 30))

    log = attendance_repo.get_for_user_and_date("u1", DAY)
    assert log is not None
    assert log.segments == (Segment(time_in=at(8, 30)),)
    assert log.total_rendered_seconds == 0
    assert log.is_clocked_in
    assert result.log == log
    assert result.arrival.status == ArrivalStatus.ON_TIME
    assert result.message == "Time in recorded."


def test_clock_in_while_open_raises_and_keeps_segments(attendance_service, attendance_repo):
    attendance_service.clock_in("u1", now=at(8, 30))
    before = attendance_repo.get_for_user_and_date("u1", DAY)

    with pytest.raises(AlreadyClockedInError):
        attendance_service.clock_in("u1", now=at(8, 45))

    assert attendance_repo.get_for_user_and_date("u1", DAY) == before


def test_clock_out_without_log_raises(attendance_service, attendance_repo):
    with pytest.raises(NotClockedInError):
        attendance_service.clock_out("u1", now=at(17, 0))

    assert attendance_repo.get_for_user_and_date("u1", DAY) is None


def test_clock_out_twice_raises_and_keeps_segments(attendance_service, attendance_repo):
    attendance_service.clock_in("u1", now=at(9, 0))
    attendance_service.clock_out("u1", now=at(12, 0))
    before = attendance_repo.get_for_user_and_date("u1", DAY)

    with pytest.raises(NotClockedInError):
        attendance_service.clock_out("u1", now=at(12, 5))

    assert attendance_repo.get_for_user_and_date("u1", DAY).segments == before.segments


def test_clock_in_then_out_closes_segment_with_floored_total(attendance_service):
    t0 = at(9, 0)
    t1 = t0 + timedelta(hours=1, minutes=2, seconds=3, milliseconds=900)

    attendance_service.clock_in("u1", now=t0)
    log = attendance_service.clock_out("u1", now=t1)

    assert log.segments == (Segment(time_in=t0, time_out=t1),)
    assert log.total_rendered_seconds == 3723
    assert not log.is_clocked_in


def test_multiple_segments_accumulate_and_only_tail_is_open(attendance_service, attendance_repo):
    attendance_service.clock_in("u1", now=at(8, 0))
    assert attendance_repo.get_for_user_and_date("u1", DAY).has_valid_segments()
    attendance_service.clock_out("u1", now=at(12, 0))
    assert attendance_repo.get_for_user_and_date("u1", DAY).has_valid_segments()
    attendance_service.clock_in("u1", now=at(13, 0))
    assert attendance_repo.get_for_user_and_date("u1", DAY).has_valid_segments()
    log = attendance_service.clock_out("u1", now=at(17, 30))

    assert log.has_valid_segments()
    assert len(log.segments) == 2
    assert all(not s.is_open for s in log.segments)
    assert log.total_rendered_seconds == 4 * 3600 + 4 * 3600 + 30 * 60


@pytest.mark.parametrize(
    "clock_in, is_late, grace_notified",
    [
        (at(9, 0, 0), False, True),
        (at(9, 14, 59), False, True),
        (at(9, 15, 0), True, False),
        (at(8, 59, 0), False, False),
    ],
)
def test_lateness_boundaries_with_default_schedule(attendance_service, clock_in, is_late, grace_notified):
    log = attendance_service.clock_in("u1", now=clock_in).log

    assert log.is_late is is_late
    assert log.grace_notified is grace_notified


def test_lateness_is_fixed_by_first_clock_in_of_the_day(attendance_service):
    attendance_service.clock_in("u1", now=at(9, 5))
    attendance_service.clock_out("u1", now=at(9, 30))

    result = attendance_service.clock_in("u1", now=at(11, 0))

    assert result.arrival is None
    assert result.log.grace_notified is True
    assert result.log.is_late is False


def test_late_flag_survives_later_segments(attendance_service):
    attendance_service.clock_in("u1", now=at(10, 0))
    attendance_service.clock_out("u1", now=at(11, 0))
    log = attendance_service.clock_in("u1", now=at(12, 0)).log

    assert log.is_late is True
    assert log.grace_notified is False


def test_lateness_uses_configured_schedule(attendance_service, schedules_repo):
    schedules_repo.upsert(
        user_id="u1",
        scheduled_time_in=time(8, 0),
        scheduled_time_out=time(17, 0),
        required_hours=486,
        schedule_configured_at=at(7, 0),
        imported_rendered_minutes=0,
    )

    result = attendance_service.clock_in("u1", now=at(8, 10))

    assert result.arrival.status == ArrivalStatus.GRACE
    assert "08:00-08:15" in result.message


def test_clock_events_invalidate_cached_logs(attendance_service, cache):
    attendance_service.get_logs("u1")
    attendance_service.get_all_logs()
    assert cache.get(keys.attendance_key("u1")) is not None

    attendance_service.clock_in("u1", now=at(9, 0))
    assert cache.get(keys.attendance_key("u1")) is None
    assert cache.get(keys.ALL_ATTENDANCE) is None

    attendance_service.get_logs("u1")
    attendance_service.clock_out("u1", now=at(10, 0))
    assert cache.get(keys.attendance_key("u1")) is None


def test_changing_returned_logs_does_not_touch_cache(attendance_service):
    attendance_service.clock_in("u1", now=at(9, 0))

    logs = attendance_service.get_logs("u1")
    logs.append("junk")
    everyone = attendance_service.get_all_logs()
    everyone.clear()

    assert len(attendance_service.get_logs("u1")) == 1
    assert len(attendance_service.get_all_logs()) == 1


class FailingAttendanceRepository(InMemoryAttendanceRepository):
    def upsert_log(self, **kwargs):
        raise PersistenceError("backend unavailable")


def test_failed_write_is_surfaced_and_changes_nothing(schedule_service, cache):
    repo = FailingAttendanceRepository()
    service = AttendanceService(repo, schedule_service, cache=cache)
    service.get_logs("u1")
    cached = cache.get(keys.attendance_key("u1"))

    with pytest.raises(PersistenceError):
        service.clock_in("u1", now=at(9, 0))

    assert repo.get_for_user_and_date("u1", DAY) is None
    assert cache.get(keys.attendance_key("u1")) == cached
    assert not service.is_busy("u1")


class RacingAttendanceRepository(InMemoryAttendanceRepository):
    """Another device creates today's log between our read and our write."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def upsert_log(self, **kwargs):
        if not self.raced:
            self.raced = True
            super().upsert_log(**{**kwargs, "segments": (Segment(time_in=at(8, 55)),)})
        return super().upsert_log(**kwargs)


def test_stale_write_is_rejected_with_authoritative_log(schedule_service, cache):
    repo = RacingAttendanceRepository()
    service = AttendanceService(repo, schedule_service, cache=cache)

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        service.clock_in("u1", now=at(9, 0))

    current = exc_info.value.current
    assert current is not None
    assert current.segments == (Segment(time_in=at(8, 55)),)
    assert current.is_clocked_in

    with pytest.raises(AlreadyClockedInError):
        service.clock_in("u1", now=at(9, 1))


class RacingThenUnreadableRepository(RacingAttendanceRepository):
    def get_for_user_and_date(self, user_id, log_date):
        if self.raced:
            raise PersistenceError("backend unavailable")
        return super().get_for_user_and_date(user_id, log_date)


def test_conflict_is_reported_even_when_reread_fails(schedule_service, cache):
    service = AttendanceService(RacingThenUnreadableRepository(), schedule_service, cache=cache)

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        service.clock_in("u1", now=at(9, 0))

    assert exc_info.value.current is None
    assert not service.is_busy("u1")


class BlockingAttendanceRepository(InMemoryAttendanceRepository):
    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def upsert_log(self, **kwargs):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().upsert_log(**kwargs)


def test_second_clock_in_while_first_in_flight_is_rejected(schedule_service):
    repo = BlockingAttendanceRepository()
    service = AttendanceService(repo, schedule_service)
    errors = []

    def first():
        try:
            service.clock_in("u1", now=at(9, 0))
        except Exception as exc:  # surfaced to the main thread below
            errors.append(exc)

    worker = threading.Thread(target=first)
    worker.start()
    assert repo.entered.wait(timeout=5)

    assert service.is_busy("u1")
    with pytest.raises(OperationInProgressError):
        service.clock_in("u1", now=at(9, 0))
    assert not service.is_busy("u2")

    repo.release.set()
    worker.join(timeout=5)

    assert errors == []
    assert not service.is_busy("u1")
    assert len(repo.get_for_user_and_date("u1", DAY).segments) == 1


def test_summary_adds_open_segment_and_prior_days(attendance_service, attendance_repo):
    attendance_repo.upsert_log(
        user_id="u1",
        log_date=date(2026, 2, 1),
        segments=(Segment(time_in=datetime(2026, 2, 1, 9, 0), time_out=datetime(2026, 2, 1, 17, 0)),),
        total_rendered_seconds=28800,
        is_late=False,
        grace_notified=False,
        expected_version=None,
    )
    now = at(14, 0)
    attendance_service.clock_in("u1", now=now - timedelta(hours=1))

    summary = attendance_service.get_summary("u1", now=now)

    assert summary.is_clocked_in
    assert summary.today_rendered_seconds == 3600
    assert summary.rendered_seconds == 9 * 3600
    assert summary.remaining_seconds == 391 * 3600
    data = summary.to_dict()
    assert data["today_elapsed"] == "01:00:00"
    assert data["rendered_hours"] == "9.00"
    assert data["remaining_hours"] == "391.00"
