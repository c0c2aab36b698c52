from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal roles used for role gating."""

    ADMIN = "admin"
    TLA = "tla"
    MONITORING_TEAM = "monitoring_team"
    PAT1 = "pat1"
    TL = "tl"
    VTL = "vtl"
    INTERN = "intern"


class Team(str, Enum):
    TLA = "tla"
    MONITORING = "monitoring"
    PAT1 = "pat1"


class ArrivalStatus(str, Enum):
    """Classification of the first clock-in of a day."""

    ON_TIME = "ON_TIME"
    GRACE = "GRACE"
    LATE = "LATE"
