from __future__ import annotations

import secrets
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import INITIALIZATION_CODE_BYTES, PASSWORD_HASH_METHOD, RESET_TOKEN_BYTES


class PasswordHasher:
    """Slow salted one-way hash with a fixed method (Werkzeug format)."""

    def __init__(self, method: str = PASSWORD_HASH_METHOD):
        self._method = method

    def hash(self, password: str) -> str:
        return generate_password_hash(password, method=self._method)

    def verify(self, password_hash: Optional[str], password: str) -> bool:
        if not password_hash:
            return False
        try:
            return check_password_hash(password_hash, password)
        except (ValueError, TypeError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False


def new_reset_token() -> str:
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)


def new_initialization_code() -> str:
    return secrets.token_urlsafe(INITIALIZATION_CODE_BYTES)
