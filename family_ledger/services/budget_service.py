"""Budget service: upserts, period budgets and budget execution."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from family_ledger.config import MemberScope
from family_ledger.db.models import Budget, Member
from family_ledger.schemas.budget import BudgetCreate, BudgetFilter, BudgetPeriodSet, BudgetUpdate
from family_ledger.schemas.record import DateRange
from family_ledger.services import aggregation
from family_ledger.services.common import SqlService, mutation_result, with_member_name
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.member_service import MemberService
from family_ledger.services.record_service import RecordService
from family_ledger.utils.errors import NotFoundError
from family_ledger.utils.time import quarter_start_month


def period_date(period: str, year: int, month: int | None) -> str:
    """Return the ISO first day of the period instance a budget covers."""
    if period == "yearly" or month is None:
        return f"{year:04d}-01-01"
    if period == "quarterly":
        month = quarter_start_month(month)
    return f"{year:04d}-{month:02d}-01"


class BudgetService:
    """Budget CRUD and reconciliation against recorded activity."""

    def __init__(self, session: Session, member_scope: MemberScope | None = None) -> None:
        self.db = SqlService(session)
        self.ledgers = LedgerService(session)
        self.members = MemberService(session, scope=member_scope)
        self.records = RecordService(session)

    def _joined(self):
        return select(Budget, Member.name).outerjoin(Member, Budget.member_id == Member.id)

    def list_budgets(
        self, ledger_id: int, filters: BudgetFilter | None = None
    ) -> list[dict[str, Any]]:
        """Return the ledger's budgets ordered by category."""
        filters = filters or BudgetFilter()
        statement = self._joined().where(Budget.ledger_id == ledger_id)
        if filters.direction:
            statement = statement.where(Budget.direction == filters.direction)
        if filters.period:
            statement = statement.where(Budget.period == filters.period)
        if filters.member_id:
            statement = statement.where(Budget.member_id == filters.member_id)
        statement = statement.order_by(Budget.category.asc(), Budget.id.asc())
        return with_member_name(self.db.execute(statement).all())

    def get(self, budget_id: int) -> dict[str, Any]:
        """Return one budget with its member name."""
        rows = with_member_name(
            self.db.execute(self._joined().where(Budget.id == budget_id)).all()
        )
        if not rows:
            raise NotFoundError("Budget")
        return rows[0]

    def add(self, data: BudgetCreate) -> dict[str, Any]:
        """Add a budget, or update the latest one already set for the ledger and category."""
        self.ledgers.ensure_exists(data.ledger_id)
        self.members.ensure_usable(data.member_id, data.ledger_id)
        payload = {
            "member_id": data.member_id,
            "direction": data.direction,
            "amount": data.amount,
            "period": data.period,
            "date": data.date.isoformat(),
        }

        existing = self.db.execute(
            select(Budget.id)
            .where(Budget.ledger_id == data.ledger_id, Budget.category == data.category)
            .order_by(Budget.id.desc())
            .limit(1)
        ).scalar_one_or_none()

        if existing is None:
            created = self.db.insert_one(
                Budget, {"ledger_id": data.ledger_id, "category": data.category, **payload}
            )
            return self.get(created["id"])

        # member_id is overwritten too, so a cleared member really clears.
        self.db.assign(Budget, {"id": existing}, payload)
        return self.get(existing)

    def set_period_budget(self, data: BudgetPeriodSet) -> dict[str, Any] | None:
        """Upsert the budget of one period instance; an amount of 0 removes it.

        The key is ``(ledger, direction, category, period, year, month)``.
        Returns the stored budget, or None when it was removed.
        """
        self.ledgers.ensure_exists(data.ledger_id)
        self.members.ensure_usable(data.member_id, data.ledger_id)
        key = {
            "ledger_id": data.ledger_id,
            "direction": data.direction,
            "category": data.category,
            "period": data.period,
            "date": period_date(data.period, data.year, data.month),
        }

        if data.amount == 0:
            self.db.delete(Budget, key)
            return None

        existing = self.db.select_many(Budget, filters=key, order_by=[Budget.id.desc()], limit=1)
        if existing:
            budget_id = existing[0]["id"]
            self.db.assign(
                Budget, {"id": budget_id}, {"amount": data.amount, "member_id": data.member_id}
            )
            return self.get(budget_id)

        created = self.db.insert_one(
            Budget, {**key, "amount": data.amount, "member_id": data.member_id}
        )
        return self.get(created["id"])

    def update(
        self, budget_id: int, changes: BudgetUpdate, ledger_id: int | None = None
    ) -> dict[str, Any]:
        """Update a budget; fields left as None keep their stored value."""
        filters: dict[str, Any] = {"id": budget_id}
        if ledger_id is not None:
            filters["ledger_id"] = ledger_id
        if changes.member_id is not None:
            stored = self.db.select_many(Budget, filters=filters, limit=1)
            if not stored:
                return mutation_result(0)
            self.members.ensure_usable(changes.member_id, stored[0]["ledger_id"])
        payload = changes.model_dump()
        if changes.date is not None:
            payload["date"] = changes.date.isoformat()
        return mutation_result(self.db.update(Budget, filters, payload))

    def delete(self, budget_id: int, ledger_id: int | None = None) -> dict[str, Any]:
        """Delete a budget; a missing id reports zero changes."""
        filters: dict[str, Any] = {"id": budget_id}
        if ledger_id is not None:
            filters["ledger_id"] = ledger_id
        return mutation_result(self.db.delete(Budget, filters))

    def execution(
        self, ledger_id: int, date_range: DateRange | None = None
    ) -> list[dict[str, Any]]:
        """Return every budget of the ledger with actual, remaining, percentage and flag."""
        budgets = self.list_budgets(ledger_id)
        actuals = self.records.actuals(ledger_id, date_range)
        return aggregation.budget_execution(budgets, actuals)
