"""Helpers shared by the Flask controllers."""
from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.exceptions import (
    AlreadyClockedInError,
    AuthenticationError,
    AuthorizationError,
    ConcurrentUpdateError,
    DomainError,
    NotClockedInError,
    OperationInProgressError,
    PersistenceError,
    ValidationError,
)
from ..attendance.service import log_to_dict
from ..users.model import Actor

logger = logging.getLogger(__name__)

_CONFLICTS = (AlreadyClockedInError, NotClockedInError, OperationInProgressError, ConcurrentUpdateError)


def current_actor() -> Actor:
    if "user_id" not in session:
        raise AuthenticationError("Please sign in to continue")
    return Actor.from_session(session)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(AuthenticationError("Please sign in to continue"))
        return view(*args, **kwargs)

    return wrapper


def error_response(exc: DomainError):
    if isinstance(exc, _CONFLICTS):
        status = 409
        if isinstance(exc, ConcurrentUpdateError):
            logger.warning("write conflict: %s", exc)
    elif isinstance(exc, ValidationError):
        status = 400
    elif isinstance(exc, AuthenticationError):
        status = 401
    elif isinstance(exc, AuthorizationError):
        status = 403
    elif isinstance(exc, PersistenceError):
        status = 503
        logger.error("persistence failure: %s", exc, exc_info=exc)
    else:
        status = 400

    body = {"success": False, "message": str(exc)}
    if isinstance(exc, ConcurrentUpdateError) and exc.current is not None:
        body["current"] = log_to_dict(exc.current)
    return jsonify(body), status
