"""Relational schema for ledgers, members, records and budgets."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

from family_ledger.utils.time import now_utc

Base = declarative_base()

DIRECTIONS = ("income", "expense")
PERIODS = ("monthly", "quarterly", "yearly")


def one_of(column: str, values: tuple[str, ...], name: str) -> CheckConstraint:
    """CHECK that ``column`` holds one of ``values``."""
    allowed = ", ".join(f"'{value}'" for value in values)
    return CheckConstraint(f"{column} IN ({allowed})", name=name)


class Ledger(Base):
    """An isolated accounting scope ("book")."""

    __tablename__ = "ledgers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    currency = Column(String(10), nullable=False, default="CNY")
    created_at = Column(DateTime, nullable=False, default=now_utc)


class Member(Base):
    """A household member; ``ledger_id`` is only meaningful in ledger member scope."""

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ledger_id = Column(Integer, ForeignKey("ledgers.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(100), nullable=False)
    avatar = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=now_utc)

    __table_args__ = (Index("idx_members_ledger_id", "ledger_id"),)


class Record(Base):
    """A single dated income or expense entry."""

    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ledger_id = Column(Integer, ForeignKey("ledgers.id", ondelete="CASCADE"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True)
    direction = Column(String(10), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=now_utc)

    __table_args__ = (
        one_of("direction", DIRECTIONS, "ck_records_direction"),
        CheckConstraint("amount >= 0", name="ck_records_amount"),
        Index("idx_records_ledger_id", "ledger_id"),
        Index("idx_records_date", "date"),
        Index("idx_records_direction", "direction"),
        Index("idx_records_category", "category"),
    )


class Budget(Base):
    """A spending/earning target for one category within one period instance."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ledger_id = Column(Integer, ForeignKey("ledgers.id", ondelete="CASCADE"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True)
    direction = Column(String(10), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    period = Column(String(10), nullable=False)
    date = Column(String(10), nullable=False)  # first day of the period instance

    __table_args__ = (
        one_of("direction", DIRECTIONS, "ck_budgets_direction"),
        one_of("period", PERIODS, "ck_budgets_period"),
        CheckConstraint("amount >= 0", name="ck_budgets_amount"),
        Index("idx_budgets_ledger_id", "ledger_id"),
    )
