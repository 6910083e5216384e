from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..scholars.model import SessionScholar

SESSION_KEY = "scholar_id"


class SessionGate:
    """Maps the signed Flask session cookie to an authenticated scholar."""

    def establish(self, identity: SessionScholar, *, remember: bool = False) -> None:
        session.clear()
        session.permanent = bool(remember)
        session[SESSION_KEY] = identity.scholar_id
        session["username"] = identity.username
        session["name"] = identity.full_name

    def current_identity(self) -> Optional[int]:
        value = session.get(SESSION_KEY)
        return int(value) if value is not None else None

    def destroy(self) -> None:
        session.clear()

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if self.current_identity() is None:
                return jsonify({"success": False, "message": "Please log in to continue."}), 401
            return view(*args, **kwargs)

        return wrapper
