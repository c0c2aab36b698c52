from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from ..attendance.model import AttendanceLog
from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_hours, now_local
from ..core.exceptions import AuthorizationError
from ..core.permissions import can_manage_schedules
from ..schedules.model import ScheduleConfig
from ..schedules.service import ScheduleService
from ..users.model import Actor
from .calculator.base import RenderedHoursCalculator
from .calculator.standard_calculator import StandardRenderedHoursCalculator


@dataclass(frozen=True)
class MemberProgress:
    user_id: str
    schedule: ScheduleConfig
    rendered_seconds: int
    remaining_seconds: int

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "scheduled_time_in": self.schedule.scheduled_time_in.strftime("%H:%M"),
            "scheduled_time_out": self.schedule.scheduled_time_out.strftime("%H:%M"),
            "required_hours": self.schedule.required_hours,
            "rendered_hours": format_hours(self.rendered_seconds),
            "remaining_hours": format_hours(self.remaining_seconds),
            "is_configured": self.schedule.is_configured,
        }


@dataclass(frozen=True)
class TeamOverview:
    configured: List[MemberProgress]
    not_configured: List[MemberProgress]

    def to_dict(self) -> dict:
        return {
            "configured": [m.to_dict() for m in self.configured],
            "not_configured": [m.to_dict() for m in self.not_configured],
        }


class ProgressService:
    def __init__(
        self,
        attendance: AttendanceService,
        schedules: ScheduleService,
        *,
        calculator: Optional[RenderedHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._calculator = calculator or StandardRenderedHoursCalculator()

    def member_progress(self, schedule: ScheduleConfig, logs, *, now: datetime) -> MemberProgress:
        rendered = self._calculator.rendered_seconds(logs, schedule, now=now)
        return MemberProgress(
            user_id=schedule.user_id,
            schedule=schedule,
            rendered_seconds=rendered,
            remaining_seconds=self._calculator.remaining_seconds(rendered, schedule),
        )

    def team_overview(self, *, actor: Actor, now: Optional[datetime] = None) -> TeamOverview:
        if not can_manage_schedules(actor.role, actor.team):
            raise AuthorizationError("You are not allowed to view team attendance")

        now = now or now_local()
        logs_by_user: Dict[str, List[AttendanceLog]] = defaultdict(list)
        for log in self._attendance.get_all_logs():
            logs_by_user[log.user_id].append(log)

        configured: List[MemberProgress] = []
        not_configured: List[MemberProgress] = []
        for schedule in sorted(self._schedules.list_schedules(), key=lambda s: s.user_id):
            row = self.member_progress(schedule, logs_by_user.get(schedule.user_id, []), now=now)
            (configured if schedule.is_configured else not_configured).append(row)

        return TeamOverview(configured=configured, not_configured=not_configured)
