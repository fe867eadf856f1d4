"""Member service with configurable member scope."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from family_ledger.config import MemberScope, settings
from family_ledger.db.models import Member
from family_ledger.services.common import SqlService, mutation_result
from family_ledger.services.ledger_service import LedgerService
from family_ledger.utils.errors import InvalidInputError

DEFAULT_AVATAR = "👤"


class MemberService:
    """Member directory.

    In ``global`` scope members are shared by every ledger and ``ledger_id`` is
    ignored on write. In ``ledger`` scope every member belongs to one ledger and
    listing requires that ledger.
    """

    def __init__(self, session: Session, scope: MemberScope | None = None) -> None:
        self.db = SqlService(session)
        self.scope: MemberScope = scope or settings.member_scope
        self.ledgers = LedgerService(session)

    @property
    def per_ledger(self) -> bool:
        return self.scope == "ledger"

    def list_members(self, ledger_id: int | None = None) -> list[dict[str, Any]]:
        """Return members in creation order."""
        order = [Member.created_at.asc(), Member.id.asc()]
        if not self.per_ledger:
            return self.db.select_many(Member, order_by=order)
        if ledger_id is None:
            raise InvalidInputError("ledger_id is required when members are scoped per ledger")
        return self.db.select_many(Member, filters={"ledger_id": ledger_id}, order_by=order)

    def get(self, member_id: int) -> dict[str, Any]:
        """Return one member or raise NotFoundError."""
        return self.db.select_one(Member, {"id": member_id}, not_found_label="Member")

    def add(
        self, name: str, avatar: str | None = None, ledger_id: int | None = None
    ) -> dict[str, Any]:
        """Create a member, bound to ``ledger_id`` in ledger scope."""
        if self.per_ledger:
            if ledger_id is None:
                raise InvalidInputError("ledger_id is required when members are scoped per ledger")
            self.ledgers.ensure_exists(ledger_id)
        else:
            ledger_id = None
        return self.db.insert_one(
            Member,
            {"name": name, "avatar": avatar or DEFAULT_AVATAR, "ledger_id": ledger_id},
        )

    def update(self, member_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        """Update name or avatar."""
        payload = {key: changes.get(key) for key in ("name", "avatar")}
        return mutation_result(self.db.update(Member, {"id": member_id}, payload))

    def delete(self, member_id: int) -> dict[str, Any]:
        """Delete a member; records and budgets keep their rows with no member."""
        return mutation_result(self.db.delete(Member, {"id": member_id}))

    def ensure_usable(self, member_id: int | None, ledger_id: int) -> None:
        """Check that an optional member reference is valid for ``ledger_id``."""
        if member_id is None:
            return
        member = self.get(member_id)
        if self.per_ledger and member.get("ledger_id") != ledger_id:
            raise InvalidInputError(f"Member {member_id} does not belong to ledger {ledger_id}")
