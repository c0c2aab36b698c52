from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .model import ScheduleConfig


def _schedule_to_dict(schedule: ScheduleConfig) -> dict:
    return {
        "user_id": schedule.user_id,
        "scheduled_time_in": schedule.scheduled_time_in.strftime("%H:%M"),
        "scheduled_time_out": schedule.scheduled_time_out.strftime("%H:%M"),
        "required_hours": schedule.required_hours,
        "schedule_configured_at": (
            schedule.schedule_configured_at.isoformat() if schedule.schedule_configured_at else None
        ),
        "imported_rendered_minutes": schedule.imported_rendered_minutes,
        "is_configured": schedule.is_configured,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules/me", methods=["GET"], endpoint="my_schedule")
    @login_required
    def my_schedule():
        try:
            schedule = container.schedule_service.get_schedule(current_actor().user_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "schedule": _schedule_to_dict(schedule)})

    @app.route("/api/schedules/<user_id>", methods=["PUT"], endpoint="save_schedule")
    @login_required
    def save_schedule(user_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            schedule = container.schedule_service.save_schedule(
                actor=current_actor(),
                user_id=user_id,
                scheduled_time_in=payload.get("scheduled_time_in"),
                scheduled_time_out=payload.get("scheduled_time_out"),
                required_hours=payload.get("required_hours"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Schedule saved.", "schedule": _schedule_to_dict(schedule)})

    @app.route("/api/schedules/<user_id>/imported-minutes", methods=["PUT"], endpoint="set_imported_minutes")
    @login_required
    def set_imported_minutes(user_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            schedule = container.schedule_service.set_imported_minutes(
                actor=current_actor(),
                user_id=user_id,
                minutes=payload.get("imported_rendered_minutes"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "schedule": _schedule_to_dict(schedule)})
