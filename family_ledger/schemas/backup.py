"""Backup document schemas."""

import datetime as dt

from pydantic import BaseModel, Field

from family_ledger.schemas.budget import Period
from family_ledger.schemas.category import Category
from family_ledger.schemas.record import Direction

BACKUP_VERSION = 1


class LedgerBackup(BaseModel):
    id: int
    name: str
    description: str = ""
    currency: str = "CNY"
    created_at: dt.datetime | None = None


class MemberBackup(BaseModel):
    id: int
    ledger_id: int | None = None
    name: str
    avatar: str = ""
    created_at: dt.datetime | None = None


class RecordBackup(BaseModel):
    id: int
    ledger_id: int
    member_id: int | None = None
    direction: Direction
    category: str
    amount: float = Field(..., ge=0)
    date: dt.date
    note: str = ""
    created_at: dt.datetime | None = None


class BudgetBackup(BaseModel):
    id: int
    ledger_id: int
    member_id: int | None = None
    direction: Direction
    category: str
    amount: float = Field(..., ge=0)
    period: Period
    date: dt.date


class BackupDocument(BaseModel):
    """Full export of stored data plus the category catalog."""

    version: int = BACKUP_VERSION
    exported_at: dt.datetime | None = None
    ledgers: list[LedgerBackup] = Field(default_factory=list)
    members: list[MemberBackup] = Field(default_factory=list)
    records: list[RecordBackup] = Field(default_factory=list)
    budgets: list[BudgetBackup] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
