from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import current_school_year, now_local
from ..core.exceptions import AlreadyPendingError, ConflictError, NotFoundError
from ..scholars.model import PayrollRecord, Scholar
from ..scholars.repository import ScholarRepository
from .state_machine import evaluate_request

logger = logging.getLogger(__name__)


def _record_ui(r: PayrollRecord) -> dict:
    return {
        "school_year": r.school_year,
        "payroll_number": r.payroll_number,
        "issued_date": r.issued_date.strftime("%Y-%m-%d"),
        "distributed_date": r.distributed_date.strftime("%Y-%m-%d") if r.distributed_date else None,
    }


class PayrollService:
    """Use case: scholar-initiated payroll requests."""

    def __init__(self, scholars: ScholarRepository):
        self._scholars = scholars

    def _require(self, scholar_id: int) -> Scholar:
        scholar = self._scholars.get_by_id(int(scholar_id))
        if not scholar:
            raise NotFoundError("Scholar not found")
        return scholar

    def request_payroll(self, scholar_id: int, *, now: Optional[datetime] = None) -> datetime:
        now = now or now_local()
        school_year = current_school_year(now.date())

        scholar = self._require(scholar_id)
        evaluate_request(scholar, school_year=school_year)

        if not self._scholars.mark_payroll_requested(
            scholar_id=scholar.scholar_id,
            school_year=school_year,
            requested_at=now,
        ):
            # Another request changed the record between our read and the update:
            # re-evaluate against the fresh state to report the precise conflict.
            evaluate_request(self._require(scholar_id), school_year=school_year)
            raise AlreadyPendingError("Payroll request already pending.")

        logger.info("Payroll requested: scholar_id=%s school_year=%s", scholar.scholar_id, school_year)
        return now

    def get_overview(self, scholar_id: int, *, today: Optional[date] = None) -> dict:
        scholar = self._require(scholar_id)
        school_year = current_school_year(today)

        try:
            evaluate_request(scholar, school_year=school_year)
            can_request, blocked_reason = True, None
        except ConflictError as e:
            can_request, blocked_reason = False, str(e)

        history = sorted(scholar.payroll_history, key=lambda r: r.issued_date, reverse=True)
        return {
            "current_school_year": school_year,
            "payroll_number": scholar.payroll_number,
            "payroll_request_status": scholar.payroll_request_status.value,
            "last_payroll_request_date": (
                scholar.last_payroll_request_date.strftime("%Y-%m-%d %H:%M:%S")
                if scholar.last_payroll_request_date
                else None
            ),
            "renewal_date": scholar.renewal_date.strftime("%Y-%m-%d") if scholar.renewal_date else None,
            "staged_payroll": _record_ui(scholar.staged_payroll) if scholar.staged_payroll else None,
            "history": [_record_ui(r) for r in history],
            "can_request": can_request,
            "blocked_reason": blocked_reason,
        }
