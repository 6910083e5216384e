from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import current_school_year
from ..core.constants import CONTACT_NUMBER_MIN_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from .model import Scholar
from .repository import ScholarRepository

logger = logging.getLogger(__name__)


def _fmt_date(value) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


class ProfileService:
    """Use case: view the scholar profile and update contact settings."""

    def __init__(self, scholars: ScholarRepository):
        self._scholars = scholars

    def _require(self, scholar_id: int) -> Scholar:
        scholar = self._scholars.get_by_id(int(scholar_id))
        if not scholar:
            raise NotFoundError("Scholar not found")
        return scholar

    def get_profile(self, scholar_id: int, *, today: Optional[date] = None) -> dict:
        s = self._require(scholar_id)
        p = s.profile
        return {
            "scholar_id": s.scholar_id,
            "username": s.username,
            "full_name": p.full_name,
            "first_name": p.first_name,
            "middle_name": p.middle_name,
            "last_name": p.last_name,
            "birth_date": _fmt_date(p.birth_date),
            "sex": p.sex,
            "student_id": p.student_id,
            "address": p.address,
            "contact_number": p.contact_number,
            "email": p.email,
            "school_type": p.school_type,
            "school_level": p.school_level,
            "school_name": p.school_name,
            "year_level": p.year_level,
            "average_grade": p.average_grade,
            "enrollment_date": _fmt_date(p.enrollment_date),
            "graduation_status": p.graduation_status,
            "graduation_date": _fmt_date(p.graduation_date),
            "renewal_status": p.renewal_status,
            "renewal_date": _fmt_date(s.renewal_date),
            "payroll_number": s.payroll_number,
            "payroll_request_status": s.payroll_request_status.value,
            "current_school_year": current_school_year(today),
        }

    def update_contact(self, scholar_id: int, contact_number: str) -> str:
        value = (contact_number or "").strip()
        if len(value) < CONTACT_NUMBER_MIN_LENGTH:
            raise ValidationError("Please enter a valid contact number.")

        if not self._scholars.update_contact_number(scholar_id=int(scholar_id), contact_number=value):
            raise NotFoundError("Scholar not found")

        logger.info("Contact number updated for scholar_id=%s", scholar_id)
        return value
