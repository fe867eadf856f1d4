"""Time helper tests."""

from __future__ import annotations

from family_ledger.utils.time import month_range, parse_iso_date, quarter_start_month, year_range


def test_parse_iso_date_with_default() -> None:
    """Missing input should return default value when provided."""
    default = parse_iso_date("2026-02-01")
    assert parse_iso_date(None, default=default) == default


def test_parse_iso_date_valid_input() -> None:
    """ISO date parsing should return exact date."""
    result = parse_iso_date("2026-02-07")
    assert result.isoformat() == "2026-02-07"


def test_month_range_handles_leap_february() -> None:
    """Month bounds should include the last day of the month."""
    assert month_range(2024, 2) == ("2024-02-01", "2024-02-29")
    assert month_range(2025, 2) == ("2025-02-01", "2025-02-28")


def test_year_range() -> None:
    assert year_range(2025) == ("2025-01-01", "2025-12-31")


def test_quarter_start_month() -> None:
    """Every month should map onto the first month of its quarter."""
    assert [quarter_start_month(m) for m in range(1, 13)] == [1, 1, 1, 4, 4, 4, 7, 7, 7, 10, 10, 10]
