"""Seed a ledger database with a small household's demo data."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DEMO_LEDGERS = [
    {"name": "家庭默认账本", "currency": "CNY"},
    {"name": "装修专项", "currency": "CNY"},
]

DEMO_MEMBERS = [
    {"name": "爸爸", "avatar": "👨"},
    {"name": "妈妈", "avatar": "👩"},
    {"name": "宝宝", "avatar": "👶"},
]


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Create demo ledgers, members, records and a budget.",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL of the database to seed (default: DATABASE_URL setting).",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="ISO date used for the sample expense (default: today).",
    )
    return parser.parse_args()


def unwrap(envelope: dict[str, Any]) -> Any:
    """Return envelope data or abort with the failure reason."""
    if not envelope["success"]:
        raise RuntimeError(f"{envelope['code']}: {envelope['error']}")
    return envelope["data"]


def seed(database_url: str | None = None, on_date: str | None = None) -> dict[str, int]:
    """Insert the demo data and return how many rows of each kind were created."""
    from family_ledger.bridge import Bridge
    from family_ledger.config import settings
    from family_ledger.db.store import LedgerStore
    from family_ledger.utils.time import parse_iso_date, utc_today

    day = parse_iso_date(on_date, default=utc_today())
    store = LedgerStore(database_url or settings.database_url).init()
    bridge = Bridge(store, settings)
    try:
        ledgers = [unwrap(bridge.call("ledgers:add", item)) for item in DEMO_LEDGERS]
        home_id = ledgers[0]["id"]
        members = [
            unwrap(bridge.call("members:add", {**item, "ledger_id": home_id}))
            for item in DEMO_MEMBERS
        ]
        father_id = members[0]["id"]

        records = [
            {
                "ledger_id": home_id,
                "member_id": father_id,
                "direction": "expense",
                "category": "food",
                "amount": 45.5,
                "date": day.isoformat(),
                "note": "午餐",
            },
            {
                "ledger_id": home_id,
                "member_id": father_id,
                "direction": "income",
                "category": "salary",
                "amount": 15000,
                "date": day.replace(day=1).isoformat(),
                "note": "工资",
            },
        ]
        for item in records:
            unwrap(bridge.call("records:add", item))

        unwrap(
            bridge.call(
                "budgets:set",
                {
                    "ledger_id": home_id,
                    "direction": "expense",
                    "category": "food",
                    "amount": 3000,
                    "period": "monthly",
                    "year": day.year,
                    "month": day.month,
                },
            )
        )
    finally:
        store.close()

    return {"ledgers": len(ledgers), "members": len(members), "records": len(records), "budgets": 1}


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    counts = seed(database_url=args.database_url, on_date=args.date)
    print("Seeded " + ", ".join(f"{count} {name}" for name, count in counts.items()))


if __name__ == "__main__":
    main()
