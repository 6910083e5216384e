from __future__ import annotations

from enum import Enum


class PayrollRequestStatus(str, Enum):
    """Payroll request lifecycle stored on the scholar record."""

    NONE = "NONE"
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"

    @classmethod
    def parse(cls, value: str | None) -> "PayrollRequestStatus":
        if not value:
            return cls.NONE
        return cls(str(value).upper())
