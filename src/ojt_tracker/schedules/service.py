from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..cache import keys
from ..cache.query_cache import QueryCache
from ..common.datetime_utils import now_local, parse_clock_time
from ..common.validators import require_non_empty, require_non_negative_int
from ..core.constants import DEFAULT_REQUIRED_HOURS
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.permissions import can_edit_own_schedule, can_manage_schedules
from ..users.model import Actor
from .model import ScheduleConfig
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def _parse_time_field(value, field_name: str):
    value = require_non_empty(value, field_name)
    try:
        return parse_clock_time(value)
    except ValueError:
        raise ValidationError(f"{field_name} must look like HH:MM") from None


def _required_hours(value) -> float:
    # Blank, zero or non-numeric targets fall back to the program default.
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_REQUIRED_HOURS)
    return hours if hours > 0 else float(DEFAULT_REQUIRED_HOURS)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, *, cache: Optional[QueryCache] = None):
        self._schedules = schedules
        self._cache = cache

    def get_schedule(self, user_id: str) -> ScheduleConfig:
        """Stored schedule, or the default time frame when none is configured."""
        user_id = str(user_id)

        def load():
            return self._schedules.get_for_user(user_id) or ScheduleConfig.default(user_id)

        if self._cache is None:
            return load()
        return self._cache.get_or_load(keys.schedule_key(user_id), load)

    def list_schedules(self) -> List[ScheduleConfig]:
        if self._cache is None:
            return list(self._schedules.list_all())
        return list(self._cache.get_or_load(keys.ALL_SCHEDULES, lambda: tuple(self._schedules.list_all())))

    def save_schedule(
        self,
        *,
        actor: Actor,
        user_id: str,
        scheduled_time_in,
        scheduled_time_out,
        required_hours=None,
        now: Optional[datetime] = None,
    ) -> ScheduleConfig:
        user_id = require_non_empty(user_id, "Intern")
        self._authorize_save(actor, user_id)

        time_in = _parse_time_field(scheduled_time_in, "Time in")
        time_out = _parse_time_field(scheduled_time_out, "Time out")

        current = self._schedules.get_for_user(user_id) or ScheduleConfig.default(user_id)
        saved = self._schedules.upsert(
            user_id=user_id,
            scheduled_time_in=time_in,
            scheduled_time_out=time_out,
            required_hours=_required_hours(required_hours),
            schedule_configured_at=now or now_local(),
            imported_rendered_minutes=current.imported_rendered_minutes,
        )
        self._invalidate(user_id)
        logger.info(
            "schedule saved user=%s by=%s in=%s out=%s required=%s",
            user_id, actor.user_id, saved.scheduled_time_in, saved.scheduled_time_out, saved.required_hours,
        )
        return saved

    def set_imported_minutes(self, *, actor: Actor, user_id: str, minutes) -> ScheduleConfig:
        if not can_manage_schedules(actor.role, actor.team):
            raise AuthorizationError("You are not allowed to manage attendance schedules")

        user_id = require_non_empty(user_id, "Intern")
        minutes = require_non_negative_int(minutes, "Imported minutes")

        current = self._schedules.get_for_user(user_id) or ScheduleConfig.default(user_id)
        saved = self._schedules.upsert(
            user_id=user_id,
            scheduled_time_in=current.scheduled_time_in,
            scheduled_time_out=current.scheduled_time_out,
            required_hours=current.required_hours,
            schedule_configured_at=current.schedule_configured_at,
            imported_rendered_minutes=minutes,
        )
        self._invalidate(user_id)
        logger.info("imported minutes set user=%s by=%s minutes=%d", user_id, actor.user_id, minutes)
        return saved

    def _authorize_save(self, actor: Actor, user_id: str) -> None:
        if can_manage_schedules(actor.role, actor.team):
            return
        if actor.user_id == user_id and can_edit_own_schedule(actor.role, actor.team):
            return
        raise AuthorizationError("You are not allowed to set this schedule")

    def _invalidate(self, user_id: str) -> None:
        if self._cache is None:
            return
        self._cache.invalidate(keys.schedule_key(user_id))
        self._cache.invalidate(keys.ALL_SCHEDULES)
