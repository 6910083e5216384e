from __future__ import annotations

import logging
import smtplib
from typing import Optional, Protocol

from flask_mail import BadHeaderError, FlaskMailUnicodeDecodeError, Mail, Message

from ..core.exceptions import DeliveryError

logger = logging.getLogger(__name__)

# Flask-Mail asserts on a missing sender instead of raising its own error type.
_SEND_FAILURES = (smtplib.SMTPException, OSError, BadHeaderError, FlaskMailUnicodeDecodeError, AssertionError)


class Notifier(Protocol):
    """Boundary to the outbound mail service."""

    def send(self, to_address: str, subject: str, body: str) -> None:
        raise NotImplementedError


class FlaskMailNotifier(Notifier):
    """Sends plain-text mail through Flask-Mail.

    ``Mail.send`` needs an application context; requests already carry one.
    Every transport or message failure surfaces as ``DeliveryError``.
    """

    def __init__(self, mail: Mail, *, sender: Optional[str] = None):
        self._mail = mail
        self._sender = sender

    def send(self, to_address: str, subject: str, body: str) -> None:
        try:
            msg = Message(subject=subject, recipients=[to_address], body=body, sender=self._sender)
            self._mail.send(msg)
        except _SEND_FAILURES as e:
            raise DeliveryError(f"mail delivery failed: {e.__class__.__name__}") from e
        logger.info("Mail sent: %s", subject)
