from __future__ import annotations

from flask import current_app, jsonify, request

from ..core.constants import SYSTEM_ERROR_MESSAGE
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (InvalidTokenError, 404),
    (ConflictError, 409),
)


def form_data():
    """Accept both HTML form posts and JSON bodies.

    JSON values must be strings; booleans become "1" or "" like a checkbox
    field. Anything else raises ``ValidationError``.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return request.form

    fields = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "1" if value else ""
        elif not isinstance(value, str):
            raise ValidationError(f"Invalid value for {key}")
        fields[key] = value
    return fields


def ok(message: str, status: int = 200, **data):
    return jsonify({"success": True, "message": message, **data}), status


def fail(error: DomainError):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(error, cls)), 400)
    return jsonify({"success": False, "message": str(error)}), status


def system_error(action: str):
    """Log the active exception and answer with the generic retry-later message."""
    current_app.logger.exception("System error while %s", action)
    return jsonify({"success": False, "message": SYSTEM_ERROR_MESSAGE}), 503
