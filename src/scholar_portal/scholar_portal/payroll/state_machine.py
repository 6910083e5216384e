"""Payroll request transition rules.

A scholar moves NONE -> PENDING (or FULFILLED -> PENDING after a new renewal)
only through :func:`evaluate_request`. PENDING -> FULFILLED happens in the
disbursement process upstream and is not modelled here.
"""
from __future__ import annotations

from ..core.enums import PayrollRequestStatus
from ..core.exceptions import AlreadyPendingError, AlreadyRequestedThisPeriodError, NotStagedError
from ..scholars.model import Scholar

_REQUESTABLE_FROM = frozenset({PayrollRequestStatus.NONE, PayrollRequestStatus.FULFILLED})


def is_staged_for(scholar: Scholar, school_year: str) -> bool:
    return scholar.staged_payroll is not None and scholar.staged_payroll.school_year == school_year


def requested_since_renewal(scholar: Scholar) -> bool:
    last = scholar.last_payroll_request_date
    renewal = scholar.renewal_date
    return last is not None and renewal is not None and last > renewal


def evaluate_request(scholar: Scholar, *, school_year: str) -> PayrollRequestStatus:
    """Return the status a payroll request moves ``scholar`` to, or raise the first failing gate."""
    if not is_staged_for(scholar, school_year):
        raise NotStagedError("Payroll is still not available.")

    if requested_since_renewal(scholar):
        raise AlreadyRequestedThisPeriodError("Payroll already requested for this renewal period.")

    if scholar.payroll_request_status not in _REQUESTABLE_FROM:
        raise AlreadyPendingError("Payroll request already pending.")

    return PayrollRequestStatus.PENDING
