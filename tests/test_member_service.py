"""Member service tests for both member scopes."""

from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy.orm import Session

from family_ledger.schemas.budget import BudgetCreate, BudgetUpdate
from family_ledger.schemas.record import RecordCreate, RecordUpdate
from family_ledger.services.budget_service import BudgetService
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.member_service import DEFAULT_AVATAR, MemberService
from family_ledger.services.record_service import RecordService
from family_ledger.utils.errors import InvalidInputError


def test_global_members_are_shared(session: Session) -> None:
    """Global members ignore ledger_id and list without one."""
    ledgers = LedgerService(session)
    home = ledgers.add("Home")
    service = MemberService(session, scope="global")

    dad = service.add("Dad", ledger_id=home["id"])
    mom = service.add("Mom", "👩")

    assert dad["ledger_id"] is None
    assert dad["avatar"] == DEFAULT_AVATAR
    assert mom["avatar"] == "👩"
    assert [item["name"] for item in service.list_members()] == ["Dad", "Mom"]
    assert [item["name"] for item in service.list_members(home["id"])] == ["Dad", "Mom"]


def test_ledger_scoped_members(session: Session) -> None:
    """Ledger-scoped members are listed per ledger."""
    ledgers = LedgerService(session)
    home = ledgers.add("Home")
    trip = ledgers.add("Trip")
    service = MemberService(session, scope="ledger")

    service.add("Dad", ledger_id=home["id"])
    service.add("Guide", ledger_id=trip["id"])

    assert [item["name"] for item in service.list_members(home["id"])] == ["Dad"]
    assert [item["name"] for item in service.list_members(trip["id"])] == ["Guide"]
    with pytest.raises(InvalidInputError):
        service.list_members()
    with pytest.raises(InvalidInputError):
        service.add("Nobody")


def test_ledger_scoped_member_must_match_record_ledger(session: Session) -> None:
    ledgers = LedgerService(session)
    home = ledgers.add("Home")
    trip = ledgers.add("Trip")
    guide = MemberService(session, scope="ledger").add("Guide", ledger_id=trip["id"])

    records = RecordService(session, member_scope="ledger")
    with pytest.raises(InvalidInputError):
        records.add(
            RecordCreate(
                ledger_id=home["id"],
                member_id=guide["id"],
                direction="expense",
                category="food",
                amount=5,
                date=dt.date(2025, 1, 1),
            )
        )


def test_update_member_keeps_omitted_fields(session: Session) -> None:
    service = MemberService(session, scope="global")
    member = service.add("Baby", "👶")

    assert service.update(member["id"], {"name": "Kid"}) == {"success": True, "changes": 1}
    stored = service.get(member["id"])
    assert stored["name"] == "Kid"
    assert stored["avatar"] == "👶"


def test_deleting_ledger_detaches_its_members(session: Session) -> None:
    ledgers = LedgerService(session)
    home = ledgers.add("Home")
    service = MemberService(session, scope="ledger")
    member = service.add("Dad", ledger_id=home["id"])

    ledgers.delete(home["id"])

    assert service.get(member["id"])["ledger_id"] is None


def test_ledger_scoped_member_is_checked_on_update(session: Session) -> None:
    """Moving a record or budget to another ledger's member is rejected."""
    ledgers = LedgerService(session)
    home = ledgers.add("Home")
    trip = ledgers.add("Trip")
    members = MemberService(session, scope="ledger")
    dad = members.add("Dad", ledger_id=home["id"])
    guide = members.add("Guide", ledger_id=trip["id"])

    records = RecordService(session, member_scope="ledger")
    record = records.add(
        RecordCreate(
            ledger_id=home["id"],
            direction="expense",
            category="food",
            amount=5,
            date=dt.date(2025, 1, 1),
        )
    )
    with pytest.raises(InvalidInputError):
        records.update(record["id"], RecordUpdate(member_id=guide["id"]))
    assert records.get(record["id"])["member_id"] is None
    assert records.update(record["id"], RecordUpdate(member_id=dad["id"]))["changes"] == 1

    budgets = BudgetService(session, member_scope="ledger")
    budget = budgets.add(
        BudgetCreate(
            ledger_id=home["id"],
            direction="expense",
            category="food",
            amount=100,
            period="monthly",
            date=dt.date(2025, 1, 1),
        )
    )
    with pytest.raises(InvalidInputError):
        budgets.update(budget["id"], BudgetUpdate(member_id=guide["id"]))
    assert budgets.get(budget["id"])["member_id"] is None
    assert budgets.update(budget["id"], BudgetUpdate(member_id=dad["id"]))["changes"] == 1


def test_update_with_member_for_missing_row_reports_zero_changes(session: Session) -> None:
    member = MemberService(session, scope="global").add("Dad")
    records = RecordService(session)
    assert records.update(999, RecordUpdate(member_id=member["id"])) == {
        "success": False,
        "changes": 0,
    }
