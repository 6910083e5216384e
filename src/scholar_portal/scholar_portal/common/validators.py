from __future__ import annotations

from ..core.exceptions import PasswordMismatchError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_matching(value: str, confirmation: str, message: str = "Passwords do not match") -> str:
    if value != confirmation:
        raise PasswordMismatchError(message)
    return value
