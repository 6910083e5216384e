from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Scholar


class ScholarRepository(Protocol):
    """Repository interface for the Scholar aggregate.

    Every mutating method is a single atomic conditional update and returns
    whether a row matched, so services never do read-then-write.
    """

    # Lookups by unique field
    def get_by_id(self, scholar_id: int) -> Optional[Scholar]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Scholar]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Scholar]:
        raise NotImplementedError

    def get_by_initialization_code(self, code: str) -> Optional[Scholar]:
        raise NotImplementedError

    def get_by_reset_token(self, token: str, *, now: datetime) -> Optional[Scholar]:
        """Only returns a scholar whose token expiry is strictly after ``now``."""

        raise NotImplementedError

    # Credential lifecycle
    def complete_initialization(
        self,
        *,
        scholar_id: int,
        code: str,
        username: str,
        password_hash: str,
        new_code: str,
    ) -> bool:
        raise NotImplementedError

    def update_password(self, *, scholar_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def set_reset_token(self, *, scholar_id: int, token: str, expires_at: datetime) -> bool:
        raise NotImplementedError

    def complete_password_reset(self, *, token: str, password_hash: str, now: datetime) -> bool:
        raise NotImplementedError

    # Profile
    def update_contact_number(self, *, scholar_id: int, contact_number: str) -> bool:
        raise NotImplementedError

    # Payroll
    def mark_payroll_requested(self, *, scholar_id: int, school_year: str, requested_at: datetime) -> bool:
        raise NotImplementedError
