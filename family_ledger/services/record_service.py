"""Record (transaction) service and raw aggregate queries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from family_ledger.config import MemberScope, settings
from family_ledger.db.models import Member, Record
from family_ledger.schemas.category import Category
from family_ledger.schemas.record import (
    CategorySummaryFilter,
    DateRange,
    RecordCreate,
    RecordFilter,
    RecordUpdate,
    SummaryFilter,
)
from family_ledger.services import aggregation
from family_ledger.services.common import (
    SqlService,
    mutation_result,
    row_to_dict,
    with_member_name,
)
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.member_service import MemberService
from family_ledger.utils.errors import NotFoundError


def record_conditions(
    ledger_id: int,
    filters: DateRange | None = None,
    direction: str | None = None,
    category: str | None = None,
) -> list[Any]:
    """Build WHERE clauses for a ledger plus optional date/member/direction/category filters."""
    conditions: list[Any] = [Record.ledger_id == ledger_id]
    if filters is not None:
        if filters.start_date:
            conditions.append(Record.date >= filters.start_date.isoformat())
        if filters.end_date:
            conditions.append(Record.date <= filters.end_date.isoformat())
        member_id = getattr(filters, "member_id", None)
        if member_id:
            conditions.append(Record.member_id == member_id)
    if direction:
        conditions.append(Record.direction == direction)
    if category:
        conditions.append(Record.category == category)
    return conditions


class RecordService:
    """Record CRUD plus the summary and category-summary aggregates."""

    def __init__(
        self,
        session: Session,
        max_page_size: int | None = None,
        member_scope: MemberScope | None = None,
    ) -> None:
        self.db = SqlService(session)
        self.ledgers = LedgerService(session)
        self.members = MemberService(session, scope=member_scope)
        self.max_page_size = max_page_size or settings.max_page_size

    def _joined(self):
        return select(Record, Member.name).outerjoin(Member, Record.member_id == Member.id)

    def list_records(
        self, ledger_id: int, filters: RecordFilter | None = None
    ) -> list[dict[str, Any]]:
        """Return records newest first (date, then creation order)."""
        filters = filters or RecordFilter()
        statement = (
            self._joined()
            .where(
                *record_conditions(
                    ledger_id, filters, direction=filters.direction, category=filters.category
                )
            )
            .order_by(Record.date.desc(), Record.created_at.desc(), Record.id.desc())
        )
        if filters.limit:
            statement = statement.limit(min(filters.limit, self.max_page_size))
        if filters.offset:
            statement = statement.offset(filters.offset)
        return with_member_name(self.db.execute(statement).all())

    def get(self, record_id: int) -> dict[str, Any]:
        """Return one record with its member name."""
        rows = with_member_name(
            self.db.execute(self._joined().where(Record.id == record_id)).all()
        )
        if not rows:
            raise NotFoundError("Record")
        return rows[0]

    def add(self, data: RecordCreate) -> dict[str, Any]:
        """Create a record in an existing ledger."""
        self.ledgers.ensure_exists(data.ledger_id)
        self.members.ensure_usable(data.member_id, data.ledger_id)
        created = self.db.insert_one(
            Record,
            {
                "ledger_id": data.ledger_id,
                "member_id": data.member_id,
                "direction": data.direction,
                "category": data.category,
                "amount": data.amount,
                "date": data.date.isoformat(),
                "note": data.note or "",
            },
        )
        return self.get(created["id"])

    def update(
        self, record_id: int, changes: RecordUpdate, ledger_id: int | None = None
    ) -> dict[str, Any]:
        """Update a record; fields left as None keep their stored value."""
        filters: dict[str, Any] = {"id": record_id}
        if ledger_id is not None:
            filters["ledger_id"] = ledger_id
        if changes.member_id is not None:
            stored = self.db.select_many(Record, filters=filters, limit=1)
            if not stored:
                return mutation_result(0)
            self.members.ensure_usable(changes.member_id, stored[0]["ledger_id"])
        payload = changes.model_dump()
        if changes.date is not None:
            payload["date"] = changes.date.isoformat()
        return mutation_result(self.db.update(Record, filters, payload))

    def delete(self, record_id: int, ledger_id: int | None = None) -> dict[str, Any]:
        """Delete a record; a missing id reports zero changes."""
        filters: dict[str, Any] = {"id": record_id}
        if ledger_id is not None:
            filters["ledger_id"] = ledger_id
        return mutation_result(self.db.delete(Record, filters))

    def sum_by_direction(
        self, ledger_id: int, filters: SummaryFilter | None = None
    ) -> dict[str, float]:
        """Return ``{direction: total}`` for the filtered records."""
        statement = (
            select(Record.direction, func.sum(Record.amount))
            .where(*record_conditions(ledger_id, filters))
            .group_by(Record.direction)
        )
        return {direction: float(total or 0) for direction, total in self.db.execute(statement)}

    def sum_by_category(
        self, ledger_id: int, direction: str, filters: SummaryFilter | None = None
    ) -> list[dict[str, Any]]:
        """Return ``{category, total, count}`` groups for one direction."""
        statement = (
            select(Record.category, func.sum(Record.amount), func.count())
            .where(*record_conditions(ledger_id, filters, direction=direction))
            .group_by(Record.category)
        )
        return [
            {"category": category, "total": float(total or 0), "count": int(count)}
            for category, total, count in self.db.execute(statement)
        ]

    def total(self, ledger_id: int, direction: str, filters: SummaryFilter | None = None) -> float:
        """Return the ungrouped total of one direction."""
        statement = select(func.coalesce(func.sum(Record.amount), 0)).where(
            *record_conditions(ledger_id, filters, direction=direction)
        )
        return float(self.db.execute(statement).scalar_one())

    def summary(self, ledger_id: int, filters: SummaryFilter | None = None) -> dict[str, float]:
        """Return income, expense and balance for the filtered records."""
        return aggregation.summary_from_totals(self.sum_by_direction(ledger_id, filters))

    def category_summary(
        self,
        ledger_id: int,
        filters: CategorySummaryFilter | None = None,
        categories: Mapping[str, Category] | None = None,
    ) -> list[dict[str, Any]]:
        """Return per-category totals, counts and percentages for one direction."""
        filters = filters or CategorySummaryFilter()
        grand_total = self.total(ledger_id, filters.direction, filters)
        groups = self.sum_by_category(ledger_id, filters.direction, filters)
        return aggregation.category_breakdown(groups, grand_total, categories)

    def actuals(
        self, ledger_id: int, date_range: DateRange | None = None
    ) -> dict[tuple[str, str], float]:
        """Return record totals keyed by ``(direction, category)`` in one grouped query."""
        statement = (
            select(Record.direction, Record.category, func.sum(Record.amount))
            .where(*record_conditions(ledger_id, date_range))
            .group_by(Record.direction, Record.category)
        )
        return {
            (direction, category): float(total or 0)
            for direction, category, total in self.db.execute(statement)
        }

    def records_between(
        self, ledger_id: int, start_date: str, end_date: str
    ) -> list[dict[str, Any]]:
        """Return the raw records of a ledger within an inclusive ISO date range."""
        statement = (
            select(Record)
            .where(
                Record.ledger_id == ledger_id,
                Record.date >= start_date,
                Record.date <= end_date,
            )
            .order_by(Record.date.asc(), Record.id.asc())
        )
        return [row_to_dict(record) for record in self.db.execute(statement).scalars()]
