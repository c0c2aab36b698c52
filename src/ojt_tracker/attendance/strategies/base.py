from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...core.enums import ArrivalStatus
from ...schedules.model import ScheduleConfig


@dataclass(frozen=True)
class ArrivalDecision:
    status: ArrivalStatus
    is_late: bool
    grace_notified: bool
    message: str


class ArrivalStrategy(ABC):
    """Strategy Pattern: encapsulate how the first clock-in of a day is classified."""

    @abstractmethod
    def decide_arrival(self, *, now: datetime, schedule: ScheduleConfig, grace_minutes: int) -> ArrivalDecision:
        raise NotImplementedError
