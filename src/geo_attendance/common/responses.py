from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.exceptions import (
    AlreadyCheckedIn,
    DomainError,
    EventEnded,
    EventNotFound,
    EventNotStarted,
    NoActiveSession,
    OutsideGeofence,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    EventNotFound: 404,
    EventNotStarted: 403,
    EventEnded: 403,
    OutsideGeofence: 403,
    NoActiveSession: 409,
    AlreadyCheckedIn: 409,
    ValidationError: 400,
}


def error_response(error: DomainError):
    """JSON body + status for a rejected request.

    Each rejection keeps its own message so the client can tell the user why.
    """

    if isinstance(error, PersistenceError):
        logger.error("Storage failure during %s: %s", error.operation, error.cause)
        return jsonify({"success": False, "error": "storage_unavailable", "message": "Please try again later"}), 500

    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return jsonify({"success": False, "error": type(error).__name__, "message": str(error)}), status

    return jsonify({"success": False, "error": type(error).__name__, "message": str(error)}), 400


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "unauthorized", "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper
