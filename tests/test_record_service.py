"""Ledger and record service tests against an in-memory store."""

from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy.orm import Session

from family_ledger.schemas.record import (
    CategorySummaryFilter,
    RecordCreate,
    RecordFilter,
    RecordUpdate,
    SummaryFilter,
)
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.member_service import MemberService
from family_ledger.services.record_service import RecordService
from family_ledger.utils.errors import NotFoundError


def _add(
    records: RecordService,
    ledger_id: int,
    direction: str,
    category: str,
    amount: float,
    day: str,
    member_id: int | None = None,
) -> dict:
    return records.add(
        RecordCreate(
            ledger_id=ledger_id,
            member_id=member_id,
            direction=direction,
            category=category,
            amount=amount,
            date=dt.date.fromisoformat(day),
        )
    )


@pytest.fixture
def ledger(session: Session) -> dict:
    return LedgerService(session).add("Household")


def test_ledger_defaults_and_listing_order(session: Session) -> None:
    """New ledgers get the default currency and are listed newest first."""
    service = LedgerService(session)
    first = service.add("Home")
    second = service.add("Renovation", "kitchen", currency="USD")

    assert first["currency"] == "CNY"
    assert first["description"] == ""
    assert second["currency"] == "USD"
    assert [item["id"] for item in service.list_ledgers()] == [second["id"], first["id"]]


def test_ledger_update_keeps_omitted_fields(session: Session) -> None:
    service = LedgerService(session)
    ledger = service.add("Home", "daily spending")

    assert service.update(ledger["id"], {"name": "Family"}) == {"success": True, "changes": 1}
    updated = service.get(ledger["id"])
    assert updated["name"] == "Family"
    assert updated["description"] == "daily spending"


def test_missing_ids_report_zero_changes(session: Session) -> None:
    """Update and delete of unknown ids are not errors."""
    assert LedgerService(session).update(999, {"name": "x"}) == {"success": False, "changes": 0}
    assert LedgerService(session).delete(999) == {"success": False, "changes": 0}
    assert RecordService(session).delete(999) == {"success": False, "changes": 0}
    assert RecordService(session).update(999, RecordUpdate(amount=1)) == {
        "success": False,
        "changes": 0,
    }


def test_add_record_requires_existing_ledger(session: Session) -> None:
    with pytest.raises(NotFoundError):
        _add(RecordService(session), 42, "expense", "food", 10, "2025-01-01")


def test_add_record_requires_existing_member(session: Session, ledger: dict) -> None:
    with pytest.raises(NotFoundError):
        _add(RecordService(session), ledger["id"], "expense", "food", 10, "2025-01-01", member_id=7)


def test_list_records_orders_by_date_then_creation(session: Session, ledger: dict) -> None:
    """Newest date first; equal dates keep the latest insert first."""
    records = RecordService(session)
    early = _add(records, ledger["id"], "expense", "food", 10, "2025-01-01")
    same_day_first = _add(records, ledger["id"], "expense", "food", 20, "2025-02-01")
    same_day_second = _add(records, ledger["id"], "income", "salary", 30, "2025-02-01")

    ids = [item["id"] for item in records.list_records(ledger["id"])]
    assert ids == [same_day_second["id"], same_day_first["id"], early["id"]]


def test_list_records_filters_and_pagination(session: Session, ledger: dict) -> None:
    records = RecordService(session)
    for day in range(1, 6):
        _add(records, ledger["id"], "expense", "food", day, f"2025-03-{day:02d}")
    _add(records, ledger["id"], "income", "salary", 100, "2025-03-03")

    expenses = records.list_records(ledger["id"], RecordFilter(direction="expense"))
    assert len(expenses) == 5

    window = records.list_records(
        ledger["id"],
        RecordFilter(direction="expense", limit=2, offset=1),
    )
    assert [item["amount"] for item in window] == [4.0, 3.0]

    dated = records.list_records(
        ledger["id"],
        RecordFilter(start_date=dt.date(2025, 3, 2), end_date=dt.date(2025, 3, 3)),
    )
    assert len(dated) == 3


def test_list_records_caps_page_size(session: Session, ledger: dict) -> None:
    records = RecordService(session, max_page_size=2)
    for day in range(1, 5):
        _add(records, ledger["id"], "expense", "food", 1, f"2025-04-{day:02d}")
    assert len(records.list_records(ledger["id"], RecordFilter(limit=50))) == 2


def test_record_update_keeps_omitted_fields(session: Session, ledger: dict) -> None:
    records = RecordService(session)
    record = _add(records, ledger["id"], "expense", "food", 10, "2025-01-01")

    result = records.update(record["id"], RecordUpdate(amount=25, note="dinner"))
    assert result == {"success": True, "changes": 1}

    stored = records.get(record["id"])
    assert stored["amount"] == 25.0
    assert stored["note"] == "dinner"
    assert stored["category"] == "food"
    assert stored["date"] == "2025-01-01"


def test_summary_and_category_summary(session: Session, ledger: dict) -> None:
    records = RecordService(session)
    _add(records, ledger["id"], "income", "salary", 1000, "2025-01-01")
    _add(records, ledger["id"], "expense", "food", 150, "2025-01-02")
    _add(records, ledger["id"], "expense", "food", 50, "2025-01-03")
    _add(records, ledger["id"], "expense", "transport", 200, "2025-02-01")

    assert records.summary(ledger["id"]) == {"income": 1000.0, "expense": 400.0, "balance": 600.0}
    january = records.summary(
        ledger["id"], SummaryFilter(start_date=dt.date(2025, 1, 1), end_date=dt.date(2025, 1, 31))
    )
    assert january == {"income": 1000.0, "expense": 200.0, "balance": 800.0}

    catalog = CategoryCatalog().as_mapping()
    rows = records.category_summary(ledger["id"], CategorySummaryFilter(), catalog)
    assert [(row["category"], row["total"], row["count"]) for row in rows] == [
        ("food", 200.0, 2),
        ("transport", 200.0, 1),
    ]
    assert [row["percentage"] for row in rows] == [50.0, 50.0]
    assert rows[0]["label"] == catalog["food"].label


def test_member_filter_in_summary(session: Session, ledger: dict) -> None:
    member = MemberService(session).add("Dad")
    records = RecordService(session)
    _add(records, ledger["id"], "expense", "food", 30, "2025-01-01", member_id=member["id"])
    _add(records, ledger["id"], "expense", "food", 70, "2025-01-01")

    summary = records.summary(ledger["id"], SummaryFilter(member_id=member["id"]))
    assert summary["expense"] == 30.0
    listed = records.list_records(ledger["id"], RecordFilter(member_id=member["id"]))
    assert [item["member_name"] for item in listed] == ["Dad"]


def test_empty_ledger_aggregates(session: Session, ledger: dict) -> None:
    records = RecordService(session)
    assert records.summary(ledger["id"]) == {"income": 0.0, "expense": 0.0, "balance": 0.0}
    assert records.category_summary(ledger["id"]) == []


def test_deleting_member_keeps_records(session: Session, ledger: dict) -> None:
    """Removing a member clears the reference instead of deleting history."""
    member = MemberService(session).add("Mom")
    records = RecordService(session)
    record = _add(records, ledger["id"], "expense", "food", 30, "2025-01-01", member["id"])

    MemberService(session).delete(member["id"])

    stored = records.get(record["id"])
    assert stored["member_id"] is None
    assert stored["member_name"] is None


def test_deleting_ledger_cascades_to_records(session: Session, ledger: dict) -> None:
    records = RecordService(session)
    record = _add(records, ledger["id"], "expense", "food", 30, "2025-01-01")

    assert LedgerService(session).delete(ledger["id"])["changes"] == 1
    with pytest.raises(NotFoundError):
        records.get(record["id"])
