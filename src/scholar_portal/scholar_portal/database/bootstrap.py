from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import current_school_year, now_local
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, sql_path: str | Path) -> None:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    sql = _strip_create_db_and_use(Path(sql_path).read_text(encoding="utf-8"))

    conn = factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("Applied schema %s", Path(schema_path).name)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("Applied seed %s", Path(seed_path).name)


def ensure_demo_scholar(db_config: dict, *, password_hash_method: str) -> None:
    """Upsert an already-initialized demo scholar with payroll staged for the current school year."""
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    now = now_local()

    conn = factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash("demo12345", method=password_hash_method)
        cur.execute("SELECT scholar_id FROM scholars WHERE email=%s", ("demo.scholar@example.com",))
        existing = cur.fetchone()
        if existing:
            cur.execute(
                """
                UPDATE scholars
                SET username=%s, password_hash=%s, staged_school_year=%s, staged_issued_date=%s,
                    staged_payroll_number=%s
                WHERE scholar_id=%s
                """,
                ("demo", password_hash, current_school_year(now.date()), now, "PR-DEMO-0001", existing["scholar_id"]),
            )
        else:
            cur.execute(
                """
                INSERT INTO scholars (
                    first_name, last_name, email, contact_number, school_name, renewal_status,
                    username, password_hash, initialization_code, payroll_request_status, renewal_date,
                    staged_school_year, staged_issued_date, staged_payroll_number
                )
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,'NONE',%s,%s,%s,%s)
                """,
                (
                    "Demo",
                    "Scholar",
                    "demo.scholar@example.com",
                    "09170000000",
                    "State University",
                    "Renewed",
                    "demo",
                    password_hash,
                    "DEMO-USED-CODE",
                    now,
                    current_school_year(now.date()),
                    now,
                    "PR-DEMO-0001",
                ),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
