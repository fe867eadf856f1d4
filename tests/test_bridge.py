"""Bridge channel and envelope tests."""

from __future__ import annotations

from family_ledger.bridge import Bridge
from family_ledger.config import Settings
from family_ledger.db.store import LedgerStore
from family_ledger.services.category_service import CategoryCatalog


def _ledger(bridge: Bridge, name: str = "Home") -> int:
    return bridge.call("ledgers:add", {"name": name})["data"]["id"]


def test_every_documented_channel_is_registered() -> None:
    expected = {
        "ledgers:list", "ledgers:add", "ledgers:update", "ledgers:delete",
        "members:list", "members:add", "members:update", "members:delete",
        "records:list", "records:add", "records:update", "records:delete",
        "records:summary", "records:categorySummary",
        "budgets:list", "budgets:add", "budgets:set", "budgets:update",
        "budgets:delete", "budgets:execution",
        "reports:yearly", "reports:budgetOverview",
        "categories:list", "categories:add", "categories:delete",
        "data:export", "data:import",
    }
    assert set(Bridge.channels()) == expected


def test_success_envelope(bridge: Bridge) -> None:
    envelope = bridge.call("ledgers:add", {"name": "Home"})
    assert envelope["success"] is True
    assert envelope["data"]["name"] == "Home"

    listed = bridge.call("ledgers:list")
    assert [item["name"] for item in listed["data"]] == ["Home"]


def test_validation_failure_envelope_writes_nothing(bridge: Bridge) -> None:
    """A rejected payload returns an error envelope and leaves the store untouched."""
    ledger_id = _ledger(bridge)
    envelope = bridge.call(
        "records:add",
        {
            "ledger_id": ledger_id,
            "direction": "sideways",
            "category": "food",
            "amount": 10,
            "date": "2025-01-01",
        },
    )
    assert envelope["success"] is False
    assert envelope["code"] == "INVALID_INPUT"
    assert "direction" in envelope["error"]

    negative = bridge.call(
        "records:add",
        {
            "ledger_id": ledger_id,
            "direction": "expense",
            "category": "food",
            "amount": -1,
            "date": "2025-01-01",
        },
    )
    assert negative["code"] == "INVALID_INPUT"
    assert bridge.call("records:list", {"ledger_id": ledger_id})["data"] == []


def test_missing_parent_is_not_found(bridge: Bridge) -> None:
    envelope = bridge.call(
        "records:add",
        {
            "ledger_id": 404,
            "direction": "expense",
            "category": "food",
            "amount": 10,
            "date": "2025-01-01",
        },
    )
    assert envelope == {"success": False, "error": "Ledger not found", "code": "NOT_FOUND"}


def test_unknown_channel(bridge: Bridge) -> None:
    envelope = bridge.call("records:explode")
    assert envelope["success"] is False
    assert envelope["code"] == "NOT_FOUND"


def test_update_and_delete_report_changes(bridge: Bridge) -> None:
    ledger_id = _ledger(bridge)

    updated = bridge.call("ledgers:update", {"id": ledger_id, "data": {"name": "Family"}})
    assert updated == {"success": True, "data": {"success": True, "changes": 1}}

    missing = bridge.call("ledgers:update", {"id": 999, "data": {"name": "x"}})
    assert missing["data"] == {"success": False, "changes": 0}

    assert bridge.call("ledgers:delete", 999)["data"]["changes"] == 0
    assert bridge.call("ledgers:delete", ledger_id)["data"]["changes"] == 1


def test_bad_id_payload(bridge: Bridge) -> None:
    envelope = bridge.call("records:delete", "abc")
    assert envelope["code"] == "INVALID_INPUT"


def test_record_flow(bridge: Bridge) -> None:
    """Add records and read them back through list, summary and category summary."""
    ledger_id = _ledger(bridge)
    member = bridge.call("members:add", {"name": "Dad", "avatar": "👨"})["data"]
    for payload in (
        {"direction": "income", "category": "salary", "amount": 15000, "date": "2025-01-01"},
        {"direction": "expense", "category": "food", "amount": 45.5, "date": "2025-01-03"},
        {"direction": "expense", "category": "food", "amount": 54.5, "date": "2025-01-04"},
    ):
        result = bridge.call(
            "records:add", {"ledger_id": ledger_id, "member_id": member["id"], **payload}
        )
        assert result["success"] is True

    listed = bridge.call("records:list", {"ledger_id": ledger_id, "options": {"limit": 2}})
    assert [item["date"] for item in listed["data"]] == ["2025-01-04", "2025-01-03"]
    assert listed["data"][0]["member_name"] == "Dad"

    summary = bridge.call("records:summary", {"ledger_id": ledger_id})
    assert summary["data"] == {"income": 15000.0, "expense": 100.0, "balance": 14900.0}

    categories = bridge.call(
        "records:categorySummary", {"ledger_id": ledger_id, "options": {"direction": "expense"}}
    )
    assert categories["data"][0]["category"] == "food"
    assert categories["data"][0]["count"] == 2
    assert categories["data"][0]["percentage"] == 100.0


def test_budget_flow(bridge: Bridge) -> None:
    ledger_id = _ledger(bridge)
    budget = {
        "ledger_id": ledger_id,
        "direction": "expense",
        "category": "food",
        "amount": 100,
        "period": "monthly",
        "date": "2025-01-01",
    }
    first = bridge.call("budgets:add", budget)["data"]
    second = bridge.call("budgets:add", {**budget, "amount": 40})["data"]
    assert first["id"] == second["id"]

    bridge.call(
        "records:add",
        {
            "ledger_id": ledger_id,
            "direction": "expense",
            "category": "food",
            "amount": 60,
            "date": "2025-01-09",
        },
    )
    execution = bridge.call("budgets:execution", {"ledger_id": ledger_id})["data"]
    assert len(execution) == 1
    assert execution[0]["actual"] == 60.0
    assert execution[0]["is_over_budget"] is True

    cleared = bridge.call(
        "budgets:set",
        {
            "ledger_id": ledger_id,
            "direction": "expense",
            "category": "food",
            "amount": 0,
            "period": "monthly",
            "year": 2025,
            "month": 1,
        },
    )
    assert cleared == {"success": True, "data": None}
    assert bridge.call("budgets:list", {"ledger_id": ledger_id})["data"] == []


def test_empty_ledger_aggregates(bridge: Bridge) -> None:
    ledger_id = _ledger(bridge)
    assert bridge.call("records:summary", {"ledger_id": ledger_id})["data"] == {
        "income": 0.0,
        "expense": 0.0,
        "balance": 0.0,
    }
    assert bridge.call("records:categorySummary", {"ledger_id": ledger_id})["data"] == []
    assert bridge.call("budgets:execution", {"ledger_id": ledger_id})["data"] == []


def test_reports_and_categories(bridge: Bridge) -> None:
    ledger_id = _ledger(bridge)
    yearly = bridge.call("reports:yearly", {"ledger_id": ledger_id, "year": 2025})
    assert len(yearly["data"]["months"]) == 12

    overview = bridge.call(
        "reports:budgetOverview",
        {"ledger_id": ledger_id, "options": {"period": "monthly", "year": 2025}},
    )
    assert overview["code"] == "INVALID_INPUT"

    added = bridge.call("categories:add", {"label": "Pets", "icon": "🐶", "direction": "expense"})
    assert added["data"]["is_default"] is False
    expense = bridge.call("categories:list", {"direction": "expense"})["data"]
    assert expense[-1]["label"] == "Pets"

    protected = bridge.call("categories:delete", "food")
    assert protected["code"] == "CONFLICT"
    assert bridge.call("categories:delete", added["data"]["id"])["success"] is True


def test_export_import_round_trip(bridge: Bridge) -> None:
    ledger_id = _ledger(bridge)
    bridge.call(
        "records:add",
        {
            "ledger_id": ledger_id,
            "direction": "expense",
            "category": "food",
            "amount": 12,
            "date": "2025-01-09",
        },
    )
    document = bridge.call("data:export")["data"]
    bridge.call("ledgers:add", {"name": "Scratch"})

    counts = bridge.call("data:import", document)["data"]
    assert counts["ledgers"] == 1
    assert [item["name"] for item in bridge.call("ledgers:list")["data"]] == ["Home"]

    broken = bridge.call("data:import", {"ledgers": [{"name": "no id"}]})
    assert broken["code"] == "INVALID_INPUT"
    assert [item["name"] for item in bridge.call("ledgers:list")["data"]] == ["Home"]


def test_ledger_scoped_bridge() -> None:
    """With per-ledger members, listing needs a ledger and returns only its members."""
    store = LedgerStore("sqlite://").init()
    try:
        scoped = Settings(database_url="sqlite://", member_scope="ledger")
        bridge = Bridge(store, scoped, CategoryCatalog())
        home = _ledger(bridge, "Home")
        trip = _ledger(bridge, "Trip")
        bridge.call("members:add", {"name": "Dad", "ledger_id": home})
        bridge.call("members:add", {"name": "Guide", "ledger_id": trip})

        assert bridge.call("members:list")["code"] == "INVALID_INPUT"
        listed = bridge.call("members:list", {"ledger_id": trip})["data"]
        assert [item["name"] for item in listed] == ["Guide"]
        assert [item["name"] for item in bridge.call("members:list", home)["data"]] == ["Dad"]
    finally:
        store.close()
