from datetime import date, datetime, time

import pytest

from ojt_tracker.attendance.model import Segment
from ojt_tracker.core.enums import Role, Team
from ojt_tracker.core.exceptions import AuthorizationError
from ojt_tracker.progress.calculator.standard_calculator import StandardRenderedHoursCalculator
from ojt_tracker.progress.service import ProgressService
from ojt_tracker.schedules.model import ScheduleConfig
from ojt_tracker.users.model import Actor

NOW = datetime(2026, 2, 2, 12, 0)
MANAGER = Actor(user_id="lead", role=Role.VTL, team=Team.MONITORING)


def add_closed_day(repo, user_id, day, hours):
    start = datetime.combine(day, time(9, 0))
    end = datetime.combine(day, time(9 + hours, 0))
    repo.upsert_log(
        user_id=user_id,
        log_date=day,
        segments=(Segment(time_in=start, time_out=end),),
        total_rendered_seconds=hours * 3600,
        is_late=False,
        grace_notified=False,
        expected_version=None,
    )


def test_standard_calculator_counts_imported_minutes():
    calc = StandardRenderedHoursCalculator()
    schedule = ScheduleConfig(user_id="u1", required_hours=10, imported_rendered_minutes=120)

    rendered = calc.rendered_seconds([], schedule, now=NOW)

    assert rendered == 7200
    assert calc.remaining_seconds(rendered, schedule) == 8 * 3600


def test_team_overview_splits_configured_members(attendance_service, schedule_service, schedules_repo, attendance_repo):
    schedules_repo.upsert(
        user_id="u2",
        scheduled_time_in=time(8, 0),
        scheduled_time_out=time(17, 0),
        required_hours=400,
        schedule_configured_at=datetime(2026, 1, 5, 8, 0),
        imported_rendered_minutes=60,
    )
    schedules_repo.upsert(
        user_id="u1",
        scheduled_time_in=time(9, 0),
        scheduled_time_out=time(18, 0),
        required_hours=400,
        schedule_configured_at=None,
        imported_rendered_minutes=0,
    )
    add_closed_day(attendance_repo, "u2", date(2026, 1, 30), 8)
    attendance_service.clock_in("u2", now=datetime(2026, 2, 2, 11, 0))

    overview = ProgressService(attendance_service, schedule_service).team_overview(actor=MANAGER, now=NOW)

    assert [m.user_id for m in overview.configured] == ["u2"]
    assert [m.user_id for m in overview.not_configured] == ["u1"]
    member = overview.configured[0]
    assert member.rendered_seconds == 8 * 3600 + 3600 + 3600
    assert member.to_dict()["rendered_hours"] == "10.00"
    assert member.to_dict()["remaining_hours"] == "390.00"


def test_team_overview_is_for_managers_only(attendance_service, schedule_service):
    service = ProgressService(attendance_service, schedule_service)

    with pytest.raises(AuthorizationError):
        service.team_overview(actor=Actor(user_id="u1", role=Role.TL, team=Team.PAT1), now=NOW)
