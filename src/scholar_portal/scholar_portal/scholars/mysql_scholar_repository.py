from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import PayrollRequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PayrollRecord, Scholar, ScholarProfile
from .repository import ScholarRepository

_SCHOLAR_COLUMNS = """
    scholar_id, first_name, middle_name, last_name, birth_date, sex, student_id, address,
    contact_number, email, school_type, school_level, school_name, year_level, average_grade,
    enrollment_date, graduation_status, graduation_date, renewal_status,
    username, password_hash, initialization_code, reset_token, reset_token_expiry,
    payroll_number, payroll_request_status, last_payroll_request_date, renewal_date,
    staged_school_year, staged_issued_date, staged_distributed_date, staged_payroll_number
"""


class MySQLScholarRepository(ScholarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Lookups --------
    def _get_where(self, clause: str, params: tuple) -> Optional[Scholar]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHOLAR_COLUMNS} FROM scholars WHERE {clause}", params)
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                """
                SELECT school_year, issued_date, distributed_date, payroll_number
                FROM payroll_history
                WHERE scholar_id=%s
                ORDER BY issued_date, payroll_id
                """,
                (int(row["scholar_id"]),),
            )
            history = tuple(
                PayrollRecord(
                    school_year=h["school_year"],
                    issued_date=h["issued_date"],
                    distributed_date=h.get("distributed_date"),
                    payroll_number=h["payroll_number"],
                )
                for h in fetchall(cur)
            )
            return self._to_scholar(row, history)

    def get_by_id(self, scholar_id: int) -> Optional[Scholar]:
        return self._get_where("scholar_id=%s", (int(scholar_id),))

    def get_by_username(self, username: str) -> Optional[Scholar]:
        return self._get_where("username=%s", (username,))

    def get_by_email(self, email: str) -> Optional[Scholar]:
        return self._get_where("email=%s", (email,))

    def get_by_initialization_code(self, code: str) -> Optional[Scholar]:
        # BINARY: exact, case-sensitive match on the code.
        return self._get_where("initialization_code = BINARY %s", (code,))

    def get_by_reset_token(self, token: str, *, now: datetime) -> Optional[Scholar]:
        return self._get_where("reset_token = BINARY %s AND reset_token_expiry > %s", (token, now))

    # -------- Credential lifecycle --------
    def complete_initialization(
        self,
        *,
        scholar_id: int,
        code: str,
        username: str,
        password_hash: str,
        new_code: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE scholars
                SET username=%s, password_hash=%s, initialization_code=%s
                WHERE scholar_id=%s AND initialization_code = BINARY %s AND password_hash IS NULL
                """,
                (username, password_hash, new_code, int(scholar_id), code),
            )
            return cur.rowcount > 0

    def update_password(self, *, scholar_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE scholars SET password_hash=%s WHERE scholar_id=%s AND password_hash IS NOT NULL",
                (password_hash, int(scholar_id)),
            )
            return cur.rowcount > 0

    def set_reset_token(self, *, scholar_id: int, token: str, expires_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE scholars SET reset_token=%s, reset_token_expiry=%s WHERE scholar_id=%s",
                (token, expires_at, int(scholar_id)),
            )
            return cur.rowcount > 0

    def complete_password_reset(self, *, token: str, password_hash: str, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE scholars
                SET password_hash=%s, reset_token=NULL, reset_token_expiry=NULL
                WHERE reset_token = BINARY %s AND reset_token_expiry > %s AND password_hash IS NOT NULL
                """,
                (password_hash, token, now),
            )
            return cur.rowcount > 0

    # -------- Profile --------
    def update_contact_number(self, *, scholar_id: int, contact_number: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE scholars SET contact_number=%s WHERE scholar_id=%s",
                (contact_number, int(scholar_id)),
            )
            # MySQL reports 0 affected rows when the value is unchanged.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM scholars WHERE scholar_id=%s", (int(scholar_id),))
            return fetchone(cur) is not None

    # -------- Payroll --------
    def mark_payroll_requested(self, *, scholar_id: int, school_year: str, requested_at: datetime) -> bool:
        """Compare-and-set PENDING: every gate of the state machine is re-asserted in the WHERE clause."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE scholars
                SET payroll_request_status=%s, last_payroll_request_date=%s
                WHERE scholar_id=%s
                  AND staged_school_year=%s
                  AND payroll_request_status<>%s
                  AND NOT (
                      last_payroll_request_date IS NOT NULL
                      AND renewal_date IS NOT NULL
                      AND last_payroll_request_date > renewal_date
                  )
                """,
                (
                    PayrollRequestStatus.PENDING.value,
                    requested_at,
                    int(scholar_id),
                    school_year,
                    PayrollRequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    # -------- Mapping --------
    @staticmethod
    def _to_scholar(r: Dict[str, Any], history: tuple) -> Scholar:
        staged = None
        if r.get("staged_school_year"):
            staged = PayrollRecord(
                school_year=r["staged_school_year"],
                issued_date=r["staged_issued_date"],
                distributed_date=r.get("staged_distributed_date"),
                payroll_number=r.get("staged_payroll_number") or "",
            )

        grade = r.get("average_grade")
        profile = ScholarProfile(
            first_name=r["first_name"],
            middle_name=r.get("middle_name"),
            last_name=r["last_name"],
            email=r["email"],
            birth_date=r.get("birth_date"),
            sex=r.get("sex"),
            student_id=r.get("student_id"),
            address=r.get("address"),
            contact_number=r.get("contact_number"),
            school_type=r.get("school_type"),
            school_level=r.get("school_level"),
            school_name=r.get("school_name"),
            year_level=r.get("year_level"),
            average_grade=float(grade) if grade is not None else None,
            enrollment_date=r.get("enrollment_date"),
            graduation_status=r.get("graduation_status"),
            graduation_date=r.get("graduation_date"),
            renewal_status=r.get("renewal_status"),
        )

        token = r.get("reset_token")
        expiry = r.get("reset_token_expiry")
        if not token or expiry is None:
            token, expiry = None, None

        return Scholar(
            scholar_id=int(r["scholar_id"]),
            profile=profile,
            initialization_code=r["initialization_code"],
            username=r.get("username"),
            password_hash=r.get("password_hash"),
            reset_token=token,
            reset_token_expiry=expiry,
            payroll_number=r.get("payroll_number"),
            payroll_request_status=PayrollRequestStatus.parse(r.get("payroll_request_status")),
            last_payroll_request_date=r.get("last_payroll_request_date"),
            renewal_date=r.get("renewal_date"),
            staged_payroll=staged,
            payroll_history=history,
        )
