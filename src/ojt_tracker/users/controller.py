from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/session/logout", methods=["POST"], endpoint="logout")
    def logout():
        user_id = session.get("user_id")
        # The next session must start cold and never see this one's cached data.
        container.cache.clear_all()
        session.clear()
        logger.info("session ended user=%s", user_id)
        return jsonify({"success": True, "message": "Signed out."})

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})
