from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_actor, error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .service import log_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        try:
            result = container.attendance_service.clock_in(current_actor().user_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({
            "success": True,
            "message": result.message,
            "status": result.arrival.status.value if result.arrival else None,
            "log": log_to_dict(result.log),
        })

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        try:
            log = container.attendance_service.clock_out(current_actor().user_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Time out recorded.", "log": log_to_dict(log)})

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        actor = current_actor()
        try:
            summary = container.attendance_service.get_summary(actor.user_id)
        except DomainError as e:
            return error_response(e)
        data = summary.to_dict()
        data["busy"] = container.attendance_service.is_busy(actor.user_id)
        return jsonify({"success": True, "attendance": data})

    @app.route("/api/attendance/team", methods=["GET"], endpoint="team_attendance")
    @login_required
    def team_attendance():
        try:
            overview = container.progress_service.team_overview(actor=current_actor())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "team": overview.to_dict()})
