"""Role gating for attendance features.

Mirrors the portal's client-side checks; the backend's row-level rules stay
the final authority.
"""
from __future__ import annotations

from typing import Optional

from .enums import Role, Team


def _coerce_role(role) -> Optional[Role]:
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(str(role))
    except ValueError:
        return None


def _coerce_team(team) -> Optional[Team]:
    if team is None or isinstance(team, Team):
        return team
    try:
        return Team(str(team))
    except ValueError:
        return None


def is_team_lead(role) -> bool:
    return _coerce_role(role) in (Role.TL, Role.VTL)


def can_use_attendance(role) -> bool:
    """Every signed-in user can clock in/out and see their own hours."""
    return True


def can_edit_own_schedule(role, team) -> bool:
    if _coerce_role(role) == Role.TLA:
        return True
    return is_team_lead(role) and _coerce_team(team) == Team.MONITORING


def can_manage_schedules(role, team) -> bool:
    return is_team_lead(role) and _coerce_team(team) == Team.MONITORING
