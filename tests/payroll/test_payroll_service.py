from __future__ import annotations

import threading
from datetime import date, datetime, timedelta

import pytest

from src.scholar_portal.scholar_portal.common.datetime_utils import current_school_year
from src.scholar_portal.scholar_portal.core.enums import PayrollRequestStatus
from src.scholar_portal.scholar_portal.core.exceptions import (
    AlreadyPendingError,
    AlreadyRequestedThisPeriodError,
    NotFoundError,
    NotStagedError,
)
from src.scholar_portal.scholar_portal.payroll.service import PayrollService
from src.scholar_portal.scholar_portal.payroll.state_machine import evaluate_request
from src.scholar_portal.scholar_portal.scholars.model import PayrollRecord
from tests.fakes import InMemoryScholars, make_scholar, staged


@pytest.mark.parametrize(
    "today,expected",
    [
        (date(2025, 6, 30), "2024-2025"),
        (date(2025, 7, 1), "2025-2026"),
        (date(2025, 12, 31), "2025-2026"),
        (date(2026, 1, 1), "2025-2026"),
    ],
)
def test_current_school_year_starts_in_july(today, expected):
    assert current_school_year(today) == expected


def test_request_payroll_moves_to_pending(fixed_now):
    repo = InMemoryScholars(make_scholar(1, staged_payroll=staged("2025-2026")))
    svc = PayrollService(repo)

    svc.request_payroll(1, now=fixed_now)

    stored = repo.get_by_id(1)
    assert stored.payroll_request_status == PayrollRequestStatus.PENDING
    assert stored.last_payroll_request_date == fixed_now


def test_second_request_is_already_pending(fixed_now):
    repo = InMemoryScholars(make_scholar(1, staged_payroll=staged("2025-2026")))
    svc = PayrollService(repo)
    svc.request_payroll(1, now=fixed_now)

    with pytest.raises(AlreadyPendingError):
        svc.request_payroll(1, now=fixed_now + timedelta(seconds=1))


def test_not_staged_when_missing(fixed_now):
    svc = PayrollService(InMemoryScholars(make_scholar(1)))

    with pytest.raises(NotStagedError):
        svc.request_payroll(1, now=fixed_now)


@pytest.mark.parametrize("status", list(PayrollRequestStatus))
@pytest.mark.parametrize("requested_after_renewal", [True, False])
def test_not_staged_for_other_school_year_regardless_of_other_fields(fixed_now, status, requested_after_renewal):
    renewal = datetime(2025, 7, 1)
    last = renewal + timedelta(days=1) if requested_after_renewal else renewal - timedelta(days=1)
    repo = InMemoryScholars(
        make_scholar(
            1,
            staged_payroll=staged("2024-2025"),
            payroll_request_status=status,
            renewal_date=renewal,
            last_payroll_request_date=last,
        )
    )

    with pytest.raises(NotStagedError):
        PayrollService(repo).request_payroll(1, now=fixed_now)


def test_already_requested_this_period(fixed_now):
    t0 = datetime(2025, 7, 1)
    t1 = datetime(2025, 8, 1)
    repo = InMemoryScholars(
        make_scholar(
            1,
            staged_payroll=staged("2025-2026"),
            payroll_request_status=PayrollRequestStatus.FULFILLED,
            renewal_date=t0,
            last_payroll_request_date=t1,
        )
    )

    with pytest.raises(AlreadyRequestedThisPeriodError):
        PayrollService(repo).request_payroll(1, now=fixed_now)


def test_renewal_gate_checked_before_pending_gate():
    scholar = make_scholar(
        1,
        staged_payroll=staged("2025-2026"),
        payroll_request_status=PayrollRequestStatus.PENDING,
        renewal_date=datetime(2025, 7, 1),
        last_payroll_request_date=datetime(2025, 8, 1),
    )

    with pytest.raises(AlreadyRequestedThisPeriodError):
        evaluate_request(scholar, school_year="2025-2026")


def test_new_renewal_reopens_requests_after_fulfilment(fixed_now):
    repo = InMemoryScholars(
        make_scholar(
            1,
            staged_payroll=staged("2025-2026"),
            payroll_request_status=PayrollRequestStatus.FULFILLED,
            last_payroll_request_date=datetime(2025, 3, 1),
            renewal_date=datetime(2025, 7, 1),
        )
    )

    PayrollService(repo).request_payroll(1, now=fixed_now)

    assert repo.get_by_id(1).payroll_request_status == PayrollRequestStatus.PENDING


def test_unknown_scholar(fixed_now):
    with pytest.raises(NotFoundError):
        PayrollService(InMemoryScholars()).request_payroll(99, now=fixed_now)


class RacingScholars(InMemoryScholars):
    """Holds every writer at a barrier so both requests read NONE before either writes."""

    def __init__(self, *scholars, parties: int):
        super().__init__(*scholars)
        self._barrier = threading.Barrier(parties, timeout=5)

    def mark_payroll_requested(self, **kwargs) -> bool:
        self._barrier.wait()
        return super().mark_payroll_requested(**kwargs)


def test_concurrent_requests_yield_one_pending_and_one_conflict(fixed_now):
    repo = RacingScholars(make_scholar(1, staged_payroll=staged("2025-2026")), parties=2)
    svc = PayrollService(repo)
    outcomes: list[object] = []
    lock = threading.Lock()

    def worker():
        try:
            svc.request_payroll(1, now=fixed_now)
            result: object = "ok"
        except AlreadyPendingError as e:
            result = e
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert outcomes.count("ok") == 1
    assert sum(isinstance(o, AlreadyPendingError) for o in outcomes) == 1
    assert repo.get_by_id(1).payroll_request_status == PayrollRequestStatus.PENDING


def test_overview_reports_history_newest_first_and_request_flag(fixed_now):
    history = (
        PayrollRecord(school_year="2023-2024", issued_date=datetime(2023, 9, 1), payroll_number="PR-1"),
        PayrollRecord(
            school_year="2024-2025",
            issued_date=datetime(2024, 9, 1),
            payroll_number="PR-2",
            distributed_date=datetime(2024, 9, 20),
        ),
    )
    repo = InMemoryScholars(make_scholar(1, staged_payroll=staged("2025-2026"), payroll_history=history))

    overview = PayrollService(repo).get_overview(1, today=fixed_now.date())

    assert overview["current_school_year"] == "2025-2026"
    assert overview["can_request"] is True
    assert [h["payroll_number"] for h in overview["history"]] == ["PR-2", "PR-1"]
    assert overview["history"][0]["distributed_date"] == "2024-09-20"


def test_overview_explains_blocked_request(fixed_now):
    repo = InMemoryScholars(make_scholar(1))

    overview = PayrollService(repo).get_overview(1, today=fixed_now.date())

    assert overview["can_request"] is False
    assert overview["blocked_reason"] == "Payroll is still not available."
