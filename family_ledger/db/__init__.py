"""Relational storage for ledgers, members, records and budgets."""

from family_ledger.db.models import DIRECTIONS, PERIODS, Base, Budget, Ledger, Member, Record
from family_ledger.db.store import LedgerStore

__all__ = [
    "DIRECTIONS",
    "PERIODS",
    "Base",
    "Budget",
    "Ledger",
    "LedgerStore",
    "Member",
    "Record",
]
