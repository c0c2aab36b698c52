from __future__ import annotations

from datetime import datetime

import pytest

from ojt_tracker.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from ojt_tracker.attendance.service import AttendanceService
from ojt_tracker.cache.query_cache import QueryCache
from ojt_tracker.container import build_container
from ojt_tracker.main import create_app
from ojt_tracker.schedules.memory_schedule_repository import InMemoryScheduleRepository
from ojt_tracker.schedules.service import ScheduleService


class ManualClock:
    """Monotonic clock for the cache; only moves when a test advances it."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def cache_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(cache_clock) -> QueryCache:
    return QueryCache(clock=cache_clock)


@pytest.fixture
def attendance_repo() -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository(clock=lambda: datetime(2026, 2, 2, 0, 0, 0))


@pytest.fixture
def schedules_repo() -> InMemoryScheduleRepository:
    return InMemoryScheduleRepository()


@pytest.fixture
def schedule_service(schedules_repo, cache) -> ScheduleService:
    return ScheduleService(schedules_repo, cache=cache)


@pytest.fixture
def attendance_service(attendance_repo, schedule_service, cache) -> AttendanceService:
    return AttendanceService(attendance_repo, schedule_service, cache=cache, grace_minutes=15)


@pytest.fixture
def container():
    return build_container(backend="memory")


@pytest.fixture
def app(container):
    return create_app(settings_module="ojt_tracker.config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sign_in(client):
    def _sign_in(user_id: str, *, role: str = "intern", team=None) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role
            if team:
                sess["team"] = team

    return _sign_in
