import pytest

from ojt_tracker.core.enums import Role, Team
from ojt_tracker.core.permissions import (
    can_edit_own_schedule,
    can_manage_schedules,
    can_use_attendance,
    is_team_lead,
)
from ojt_tracker.users.model import Actor


@pytest.mark.parametrize(
    "role, team, own, manage",
    [
        (Role.INTERN, None, False, False),
        (Role.TLA, Team.TLA, True, False),
        (Role.TL, Team.MONITORING, True, True),
        ("vtl", "monitoring", True, True),
        (Role.TL, Team.PAT1, False, False),
        (Role.ADMIN, None, False, False),
        ("nonsense", "monitoring", False, False),
    ],
)
def test_schedule_permissions(role, team, own, manage):
    assert can_edit_own_schedule(role, team) is own
    assert can_manage_schedules(role, team) is manage


def test_everyone_can_use_attendance():
    assert all(can_use_attendance(role) for role in Role)


def test_team_leads():
    assert is_team_lead("tl")
    assert is_team_lead(Role.VTL)
    assert not is_team_lead(Role.TLA)


def test_actor_from_session_tolerates_unknown_values():
    actor = Actor.from_session({"user_id": 42, "role": "wizard", "team": "nowhere"})

    assert actor.user_id == "42"
    assert actor.role == Role.INTERN
    assert actor.team is None
