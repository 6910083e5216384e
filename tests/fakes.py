"""In-memory stand-ins for the MySQL repositories and the mail transport."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.scholar_portal.scholar_portal.activities.model import ActivityProgram
from src.scholar_portal.scholar_portal.core.enums import PayrollRequestStatus
from src.scholar_portal.scholar_portal.core.exceptions import DeliveryError
from src.scholar_portal.scholar_portal.scholars.model import PayrollRecord, Scholar, ScholarProfile


def make_scholar(scholar_id: int = 1, **overrides) -> Scholar:
    profile = ScholarProfile(
        first_name="Juan",
        middle_name=None,
        last_name="Dela Cruz",
        email=overrides.pop("email", f"scholar{scholar_id}@example.com"),
        contact_number="09171234567",
        school_name="State University",
    )
    values = dict(
        scholar_id=scholar_id,
        profile=profile,
        initialization_code=f"CODE{scholar_id}",
    )
    values.update(overrides)
    return Scholar(**values)


def staged(school_year: str, number: str = "PR-0001") -> PayrollRecord:
    return PayrollRecord(school_year=school_year, issued_date=datetime(2025, 8, 1), payroll_number=number)


class InMemoryScholars:
    """Applies each mutation as one compare-and-set under a lock, like the SQL UPDATEs."""

    def __init__(self, *scholars: Scholar):
        self._lock = threading.Lock()
        self._by_id: dict[int, Scholar] = {s.scholar_id: s for s in scholars}

    def add(self, scholar: Scholar) -> None:
        with self._lock:
            self._by_id[scholar.scholar_id] = scholar

    def _find(self, pred) -> Optional[Scholar]:
        with self._lock:
            return next((s for s in self._by_id.values() if pred(s)), None)

    def get_by_id(self, scholar_id: int) -> Optional[Scholar]:
        with self._lock:
            return self._by_id.get(int(scholar_id))

    def get_by_username(self, username: str) -> Optional[Scholar]:
        return self._find(lambda s: s.username is not None and s.username == username)

    def get_by_email(self, email: str) -> Optional[Scholar]:
        return self._find(lambda s: s.profile.email == email)

    def get_by_initialization_code(self, code: str) -> Optional[Scholar]:
        return self._find(lambda s: s.initialization_code == code)

    def get_by_reset_token(self, token: str, *, now: datetime) -> Optional[Scholar]:
        return self._find(lambda s: s.reset_token == token and s.has_valid_reset_token(now))

    def complete_initialization(self, *, scholar_id, code, username, password_hash, new_code) -> bool:
        with self._lock:
            s = self._by_id.get(int(scholar_id))
            if not s or s.initialization_code != code or s.password_hash is not None:
                return False
            self._by_id[s.scholar_id] = replace(
                s, username=username, password_hash=password_hash, initialization_code=new_code
            )
            return True

    def update_password(self, *, scholar_id, password_hash) -> bool:
        with self._lock:
            s = self._by_id.get(int(scholar_id))
            if not s or s.password_hash is None:
                return False
            self._by_id[s.scholar_id] = replace(s, password_hash=password_hash)
            return True

    def set_reset_token(self, *, scholar_id, token, expires_at) -> bool:
        with self._lock:
            s = self._by_id.get(int(scholar_id))
            if not s:
                return False
            self._by_id[s.scholar_id] = replace(s, reset_token=token, reset_token_expiry=expires_at)
            return True

    def complete_password_reset(self, *, token, password_hash, now) -> bool:
        with self._lock:
            for s in self._by_id.values():
                if s.reset_token == token and s.has_valid_reset_token(now) and s.password_hash is not None:
                    self._by_id[s.scholar_id] = replace(
                        s, password_hash=password_hash, reset_token=None, reset_token_expiry=None
                    )
                    return True
            return False

    def update_contact_number(self, *, scholar_id, contact_number) -> bool:
        with self._lock:
            s = self._by_id.get(int(scholar_id))
            if not s:
                return False
            self._by_id[s.scholar_id] = replace(s, profile=replace(s.profile, contact_number=contact_number))
            return True

    def mark_payroll_requested(self, *, scholar_id, school_year, requested_at) -> bool:
        with self._lock:
            s = self._by_id.get(int(scholar_id))
            if not s or not s.staged_payroll or s.staged_payroll.school_year != school_year:
                return False
            if s.payroll_request_status == PayrollRequestStatus.PENDING:
                return False
            last, renewal = s.last_payroll_request_date, s.renewal_date
            if last is not None and renewal is not None and last > renewal:
                return False
            self._by_id[s.scholar_id] = replace(
                s,
                payroll_request_status=PayrollRequestStatus.PENDING,
                last_payroll_request_date=requested_at,
            )
            return True


class InMemoryActivities:
    def __init__(self):
        self._items: list[ActivityProgram] = []

    def create(
        self,
        *,
        scholar_id: int,
        title: str,
        description: Optional[str],
        start_date: date,
        end_date: date,
        image_data: Optional[str],
        image_media_type: Optional[str],
        created_at: datetime,
    ) -> int:
        program_id = len(self._items) + 1
        self._items.append(
            ActivityProgram(
                program_id=program_id,
                scholar_id=scholar_id,
                title=title,
                description=description,
                start_date=start_date,
                end_date=end_date,
                created_at=created_at,
                image_data=image_data,
                image_media_type=image_media_type,
            )
        )
        return program_id

    def list_for_scholar(self, scholar_id: int):
        items = [p for p in self._items if p.scholar_id == scholar_id]
        items.sort(key=lambda p: (p.created_at, p.program_id), reverse=True)
        return items


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, to_address: str, subject: str, body: str) -> None:
        self.sent.append({"to": to_address, "subject": subject, "body": body})


class FailingNotifier:
    def __init__(self):
        self.attempts = 0

    def send(self, to_address: str, subject: str, body: str) -> None:
        self.attempts += 1
        raise DeliveryError("SMTP connection refused")
