from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import PayrollRequestStatus


@dataclass(frozen=True)
class PayrollRecord:
    """A payroll offer, either staged for request or already disbursed."""

    school_year: str
    issued_date: datetime
    payroll_number: str
    distributed_date: Optional[datetime] = None


@dataclass(frozen=True)
class ScholarProfile:
    """Identity and school details. Opaque to the credential and payroll rules."""

    first_name: str
    last_name: str
    email: str
    middle_name: Optional[str] = None
    birth_date: Optional[date] = None
    sex: Optional[str] = None
    student_id: Optional[str] = None
    address: Optional[str] = None
    contact_number: Optional[str] = None
    school_type: Optional[str] = None
    school_level: Optional[str] = None
    school_name: Optional[str] = None
    year_level: Optional[str] = None
    average_grade: Optional[float] = None
    enrollment_date: Optional[date] = None
    graduation_status: Optional[str] = None
    graduation_date: Optional[date] = None
    renewal_status: Optional[str] = None

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class Scholar:
    """Domain entity: Scholar aggregate root.

    Plain data (no DB access). Mutations go through repository methods that apply
    a single conditional UPDATE each.
    """

    scholar_id: int
    profile: ScholarProfile
    initialization_code: str
    username: Optional[str] = None
    password_hash: Optional[str] = None
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None
    payroll_number: Optional[str] = None
    payroll_request_status: PayrollRequestStatus = PayrollRequestStatus.NONE
    last_payroll_request_date: Optional[datetime] = None
    renewal_date: Optional[datetime] = None
    staged_payroll: Optional[PayrollRecord] = None
    payroll_history: Tuple[PayrollRecord, ...] = field(default_factory=tuple)

    @property
    def is_initialized(self) -> bool:
        return self.password_hash is not None

    def has_valid_reset_token(self, now: datetime) -> bool:
        return bool(self.reset_token) and self.reset_token_expiry is not None and self.reset_token_expiry > now


@dataclass(frozen=True)
class SessionScholar:
    """What we store into Flask session after login/initialization."""

    scholar_id: int
    username: str
    full_name: str
