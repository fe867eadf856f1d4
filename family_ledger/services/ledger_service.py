"""Ledger ("book") service."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from family_ledger.config import settings
from family_ledger.db.models import Ledger
from family_ledger.services.common import SqlService, mutation_result


class LedgerService:
    """Create, list, rename and delete ledgers."""

    def __init__(self, session: Session, default_currency: str | None = None) -> None:
        self.db = SqlService(session)
        self.default_currency = default_currency or settings.default_currency

    def list_ledgers(self) -> list[dict[str, Any]]:
        """Return every ledger, newest first."""
        return self.db.select_many(Ledger, order_by=[Ledger.created_at.desc(), Ledger.id.desc()])

    def get(self, ledger_id: int) -> dict[str, Any]:
        """Return one ledger or raise NotFoundError."""
        return self.db.select_one(Ledger, {"id": ledger_id}, not_found_label="Ledger")

    def ensure_exists(self, ledger_id: int) -> None:
        """Raise NotFoundError when the ledger is missing."""
        self.get(ledger_id)

    def add(
        self, name: str, description: str = "", currency: str | None = None
    ) -> dict[str, Any]:
        """Create a ledger row."""
        return self.db.insert_one(
            Ledger,
            {
                "name": name,
                "description": description or "",
                "currency": currency or self.default_currency,
            },
        )

    def update(self, ledger_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        """Update name, description or currency; missing ids report zero changes."""
        payload = {key: changes.get(key) for key in ("name", "description", "currency")}
        return mutation_result(self.db.update(Ledger, {"id": ledger_id}, payload))

    def delete(self, ledger_id: int) -> dict[str, Any]:
        """Delete a ledger; its records and budgets go with it."""
        return mutation_result(self.db.delete(Ledger, {"id": ledger_id}))
