"""API router package."""

from family_ledger.routers import backup, budgets, categories, ledgers, members, records, reports

__all__ = [
    "backup",
    "budgets",
    "categories",
    "ledgers",
    "members",
    "records",
    "reports",
]
