from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_matching, require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH, RESET_ACKNOWLEDGEMENT, RESET_TOKEN_TTL
from ..core.exceptions import (
    AlreadyInitializedError,
    AuthenticationError,
    DeliveryError,
    InvalidCodeError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from ..notifications.mailer import Notifier
from ..scholars.model import Scholar, SessionScholar
from ..scholars.repository import ScholarRepository
from .hashing import PasswordHasher, new_initialization_code, new_reset_token

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Scholar Portal Password Reset Request"
RESET_EMAIL_BODY = (
    "You are receiving this because you (or someone else) have requested the reset of the "
    "password for your account.\n\n"
    "Please click on the following link, or paste this into your browser to complete the process:\n\n"
    "{link}\n\n"
    "This link will expire in one hour.\n\n"
    "If you did not request this, please ignore this email and your password will remain unchanged.\n"
)


@dataclass(frozen=True)
class ResetRequestResult:
    """Outcome of a forgot-password request.

    ``message`` is the only part shown to the user; ``delivery_failed`` is for
    internal reporting and never reveals whether the address matched.
    """

    message: str
    delivery_failed: bool = False


def _validate_new_password(password: str, confirm: str) -> None:
    if not password or not confirm:
        raise ValidationError("Please enter and confirm your new password.")
    require_min_length(password, "Password", PASSWORD_MIN_LENGTH)
    require_matching(password, confirm)


class CredentialService:
    """Use cases: account initialization, login, password change and reset."""

    def __init__(
        self,
        scholars: ScholarRepository,
        notifier: Notifier,
        *,
        hasher: Optional[PasswordHasher] = None,
        code_factory: Callable[[], str] = new_initialization_code,
        token_factory: Callable[[], str] = new_reset_token,
    ):
        self._scholars = scholars
        self._notifier = notifier
        self._hasher = hasher or PasswordHasher()
        self._code_factory = code_factory
        self._token_factory = token_factory

    @staticmethod
    def _session_for(scholar: Scholar, username: str) -> SessionScholar:
        return SessionScholar(
            scholar_id=scholar.scholar_id,
            username=username,
            full_name=scholar.profile.full_name,
        )

    # -------- Initialization --------
    def initialize(self, code: str, username: str, password: str, confirm_password: str) -> SessionScholar:
        require_matching(password, confirm_password)
        username = require_non_empty(username, "Username")
        if not password:
            raise ValidationError("Password is required")

        code = code or ""
        scholar = self._scholars.get_by_initialization_code(code) if code else None
        if not scholar:
            raise InvalidCodeError("Invalid Initialization Code")
        if scholar.is_initialized:
            raise AlreadyInitializedError("Account already initialized. Please log in.")

        taken = self._scholars.get_by_username(username)
        if taken and taken.scholar_id != scholar.scholar_id:
            raise ValidationError("Username is already taken")

        password_hash = self._hasher.hash(password)
        updated = self._scholars.complete_initialization(
            scholar_id=scholar.scholar_id,
            code=code,
            username=username,
            password_hash=password_hash,
            new_code=self._code_factory(),
        )
        if not updated:
            # Lost a race with another initialization of the same account.
            raise AlreadyInitializedError("Account already initialized. Please log in.")

        logger.info("Scholar account initialized: scholar_id=%s", scholar.scholar_id)
        return self._session_for(scholar, username)

    # -------- Login --------
    def login(self, username: str, password: str) -> SessionScholar:
        scholar = self._scholars.get_by_username((username or "").strip()) if username else None
        if not scholar or not scholar.is_initialized:
            raise NotFoundError("Account not found or not initialized")

        if not self._hasher.verify(scholar.password_hash, password or ""):
            raise AuthenticationError("Invalid password")

        return self._session_for(scholar, scholar.username or "")

    # -------- Settings --------
    def change_password(self, scholar_id: int, current: str, new: str, confirm_new: str) -> None:
        if not current or not new or not confirm_new:
            raise ValidationError("Please fill in all password fields.")
        require_min_length(new, "New password", PASSWORD_MIN_LENGTH)
        require_matching(new, confirm_new, "New passwords do not match.")

        scholar = self._scholars.get_by_id(int(scholar_id))
        if not scholar:
            raise NotFoundError("Scholar not found")
        if not self._hasher.verify(scholar.password_hash, current):
            raise AuthenticationError("Incorrect current password.")

        if not self._scholars.update_password(scholar_id=scholar.scholar_id, password_hash=self._hasher.hash(new)):
            raise NotFoundError("Scholar not found")
        logger.info("Password changed: scholar_id=%s", scholar.scholar_id)

    # -------- Password reset --------
    def request_reset(
        self,
        email: str,
        *,
        reset_link: Callable[[str], str],
        now: Optional[datetime] = None,
    ) -> ResetRequestResult:
        """Issue a reset token if ``email`` belongs to an initialized account.

        The token is persisted before the email is attempted; a delivery failure
        leaves it valid.
        """
        now = now or now_local()
        address = (email or "").strip()
        scholar = self._scholars.get_by_email(address) if address else None

        if not scholar or not scholar.is_initialized:
            logger.info("Password reset requested for an address with no active account")
            return ResetRequestResult(message=RESET_ACKNOWLEDGEMENT)

        token = self._token_factory()
        self._scholars.set_reset_token(
            scholar_id=scholar.scholar_id,
            token=token,
            expires_at=now + RESET_TOKEN_TTL,
        )

        try:
            self._notifier.send(
                scholar.profile.email,
                RESET_EMAIL_SUBJECT,
                RESET_EMAIL_BODY.format(link=reset_link(token)),
            )
        except DeliveryError as e:
            logger.error("Password reset email failed for scholar_id=%s: %s", scholar.scholar_id, e)
            return ResetRequestResult(message=RESET_ACKNOWLEDGEMENT, delivery_failed=True)

        logger.info("Password reset email sent for scholar_id=%s", scholar.scholar_id)
        return ResetRequestResult(message=RESET_ACKNOWLEDGEMENT)

    def resolve_reset(self, token: str, *, now: Optional[datetime] = None) -> Scholar:
        now = now or now_local()
        scholar = self._scholars.get_by_reset_token(token, now=now) if token else None
        if not scholar:
            raise InvalidTokenError("Password reset token is invalid or has expired.")
        return scholar

    def complete_reset(
        self,
        token: str,
        password: str,
        confirm_password: str,
        *,
        now: Optional[datetime] = None,
    ) -> None:
        _validate_new_password(password, confirm_password)
        now = now or now_local()

        scholar = self.resolve_reset(token, now=now)
        updated = self._scholars.complete_password_reset(
            token=token,
            password_hash=self._hasher.hash(password),
            now=now,
        )
        if not updated:
            raise InvalidTokenError("Password reset token is invalid or has expired.")
        logger.info("Password reset completed: scholar_id=%s", scholar.scholar_id)
