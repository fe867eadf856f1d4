"""Whole-store export and import."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session

from family_ledger.db.models import Budget, Ledger, Member, Record
from family_ledger.schemas.backup import BACKUP_VERSION, BackupDocument
from family_ledger.schemas.category import Category
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.common import SqlService
from family_ledger.utils.errors import InvalidInputError
from family_ledger.utils.time import now_utc

logger = logging.getLogger(__name__)


class BackupService:
    """Serialize every table plus custom categories, and restore from that document."""

    def __init__(self, session: Session, categories: CategoryCatalog) -> None:
        self.db = SqlService(session)
        self.categories = categories

    def export(self) -> dict[str, Any]:
        """Return the full contents of the store as a backup document."""
        tables = {
            name: self.db.select_many(model, order_by=[model.id.asc()])
            for name, model in (
                ("ledgers", Ledger),
                ("members", Member),
                ("records", Record),
                ("budgets", Budget),
            )
        }
        document = BackupDocument(
            exported_at=now_utc(),
            categories=[
                item for item in self.categories.list_categories() if not item.is_default
            ],
            **tables,
        )
        return document.model_dump(mode="json")

    def import_(self, payload: dict[str, Any]) -> dict[str, int]:
        """Replace all stored data with ``payload``; ids are preserved.

        Runs inside the caller's session, so a failure leaves the previous
        data untouched. Custom categories are written once that session
        commits and dropped if it rolls back.
        """
        document = BackupDocument.model_validate(payload)
        if document.version > BACKUP_VERSION:
            raise InvalidInputError(f"Unsupported backup version {document.version}")

        for model in (Budget, Record, Member, Ledger):
            self.db.delete(model, {})
        # Restored rows reuse ids that may still be in the identity map.
        self.db.session.expunge_all()

        for item in document.ledgers:
            self.db.insert_one(Ledger, item.model_dump(exclude_none=True))
        for item in document.members:
            self.db.insert_one(Member, item.model_dump(exclude_none=True))
        for item in document.records:
            row = item.model_dump(exclude_none=True)
            row["date"] = item.date.isoformat()
            self.db.insert_one(Record, row)
        for item in document.budgets:
            row = item.model_dump(exclude_none=True)
            row["date"] = item.date.isoformat()
            self.db.insert_one(Budget, row)

        self._replace_categories_on_commit(
            [item for item in document.categories if not item.is_default]
        )

        counts = {
            "ledgers": len(document.ledgers),
            "members": len(document.members),
            "records": len(document.records),
            "budgets": len(document.budgets),
            "categories": len(document.categories),
        }
        logger.info("Imported backup: %s", counts)
        return counts

    def _replace_categories_on_commit(self, custom: list[Category]) -> None:
        pending = [custom]

        def apply(_session: Session) -> None:
            if pending:
                self.categories.replace(pending.pop())

        def discard(_session: Session) -> None:
            if pending:
                pending.clear()
                logger.info("Backup import rolled back; categories left unchanged")

        event.listen(self.db.session, "after_commit", apply)
        event.listen(self.db.session, "after_rollback", discard)
