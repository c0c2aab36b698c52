from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, Team


@dataclass(frozen=True)
class Actor:
    """The signed-in user performing an action.

    Identity comes from the external auth provider; only what role gating
    needs is kept here.
    """

    user_id: str
    role: Role = Role.INTERN
    team: Optional[Team] = None

    @classmethod
    def from_session(cls, data) -> "Actor":
        role = data.get("role") or Role.INTERN.value
        team = data.get("team")
        try:
            role = Role(role)
        except ValueError:
            role = Role.INTERN
        try:
            team = Team(team) if team else None
        except ValueError:
            team = None
        return cls(user_id=str(data["user_id"]), role=role, team=team)
