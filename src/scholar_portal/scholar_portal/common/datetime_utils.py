from __future__ import annotations

from datetime import date, datetime

from ..core.constants import SCHOOL_YEAR_START_MONTH
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: str | None, field_name: str) -> date | None:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def current_school_year(today: date | None = None) -> str:
    """School year label such as ``"2025-2026"`` for the July-June period containing ``today``."""
    today = today or now_local().date()
    start = today.year if today.month >= SCHOOL_YEAR_START_MONTH else today.year - 1
    return f"{start}-{start + 1}"
