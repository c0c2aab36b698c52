from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import ArrivalStrategyFactory
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .cache.query_cache import QueryCache
from .core.constants import DEFAULT_CACHE_TTL_MS, DEFAULT_GRACE_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .progress.service import ProgressService
from .schedules.memory_schedule_repository import InMemoryScheduleRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    cache: QueryCache

    attendance_repo: AttendanceRepository
    schedules_repo: ScheduleRepository

    attendance_service: AttendanceService
    schedule_service: ScheduleService
    progress_service: ProgressService


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = "mysql",
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    cache: Optional[QueryCache] = None,
) -> Container:
    conn = None
    if backend == "memory":
        attendance_repo = InMemoryAttendanceRepository()
        schedules_repo = InMemoryScheduleRepository()
    elif backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        attendance_repo = MySQLAttendanceRepository(conn)
        schedules_repo = MySQLScheduleRepository(conn)
    else:
        raise ValueError(f"Unknown storage backend: {backend!r}")

    cache = cache if cache is not None else QueryCache(cache_ttl_ms)

    schedule_service = ScheduleService(schedules_repo, cache=cache)
    attendance_service = AttendanceService(
        attendance_repo,
        schedule_service,
        cache=cache,
        strategy_factory=ArrivalStrategyFactory(),
        grace_minutes=grace_minutes,
    )
    progress_service = ProgressService(attendance_service, schedule_service)

    return Container(
        conn=conn,
        cache=cache,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        attendance_service=attendance_service,
        schedule_service=schedule_service,
        progress_service=progress_service,
    )
