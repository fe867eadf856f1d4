"""Time utility helpers."""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def utc_today() -> date:
    """Return current UTC date."""
    return now_utc().date()


def parse_iso_date(value: str | None, default: date | None = None) -> date:
    """Parse an ISO date string with an optional fallback default."""
    if not value:
        if default is None:
            raise ValueError("Missing required date value")
        return default
    return date.fromisoformat(value)


def month_range(year: int, month: int) -> tuple[str, str]:
    """Return the inclusive first/last ISO dates of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


def year_range(year: int) -> tuple[str, str]:
    """Return the inclusive first/last ISO dates of a calendar year."""
    return date(year, 1, 1).isoformat(), date(year, 12, 31).isoformat()


def quarter_start_month(month: int) -> int:
    """Return the first month (1, 4, 7 or 10) of the quarter containing ``month``."""
    return ((month - 1) // 3) * 3 + 1
