"""In-process request/response bridge.

A UI process calls :meth:`Bridge.call` with a channel name such as
``"records:list"`` and a JSON-like payload, and always receives an envelope:
``{"success": True, "data": ...}`` or ``{"success": False, "error": ..., "code": ...}``.
Every call runs in its own session, so a failed call writes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from family_ledger.config import Settings, settings as default_settings
from family_ledger.db.store import LedgerStore
from family_ledger.schemas.budget import (
    BudgetCreate,
    BudgetFilter,
    BudgetPeriodSet,
    BudgetUpdate,
)
from family_ledger.schemas.category import CategoryCreate
from family_ledger.schemas.ledger import LedgerCreate, LedgerUpdate
from family_ledger.schemas.member import MemberCreate, MemberUpdate
from family_ledger.schemas.record import (
    CategorySummaryFilter,
    DateRange,
    RecordCreate,
    RecordFilter,
    RecordUpdate,
    SummaryFilter,
)
from family_ledger.schemas.report import BudgetOverviewQuery
from family_ledger.services.backup_service import BackupService
from family_ledger.services.budget_service import BudgetService
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.member_service import MemberService
from family_ledger.services.record_service import RecordService
from family_ledger.services.report_service import ReportService
from family_ledger.utils.errors import InvalidInputError, NotFoundError
from family_ledger.utils.result import Result, capture

logger = logging.getLogger(__name__)

Handler = Callable[["CallContext", Any], Any]

_HANDLERS: dict[str, Handler] = {}


def channel(name: str) -> Callable[[Handler], Handler]:
    """Register a handler for ``name``."""

    def decorator(func: Handler) -> Handler:
        _HANDLERS[name] = func
        return func

    return decorator


class CallContext:
    """Services bound to the session of a single bridge call."""

    def __init__(self, session: Session, settings: Settings, categories: CategoryCatalog) -> None:
        self.session = session
        self.settings = settings
        self.categories = categories

    @property
    def ledgers(self) -> LedgerService:
        return LedgerService(self.session, default_currency=self.settings.default_currency)

    @property
    def members(self) -> MemberService:
        return MemberService(self.session, scope=self.settings.member_scope)

    @property
    def records(self) -> RecordService:
        return RecordService(
            self.session,
            max_page_size=self.settings.max_page_size,
            member_scope=self.settings.member_scope,
        )

    @property
    def budgets(self) -> BudgetService:
        return BudgetService(self.session, member_scope=self.settings.member_scope)

    @property
    def reports(self) -> ReportService:
        return ReportService(self.session, self.categories)

    @property
    def backup(self) -> BackupService:
        return BackupService(self.session, self.categories)


def _mapping(payload: Any) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInputError("Payload must be an object")
    return payload


def _entity_id(payload: Any) -> int:
    """Accept either a bare id or ``{"id": ...}``."""
    if isinstance(payload, dict):
        payload = payload.get("id")
    if isinstance(payload, bool) or not isinstance(payload, int):
        raise InvalidInputError("id must be an integer")
    return payload


def _ledger_id(payload: dict[str, Any]) -> int:
    ledger_id = payload.get("ledger_id")
    if isinstance(ledger_id, bool) or not isinstance(ledger_id, int):
        raise InvalidInputError("ledger_id must be an integer")
    return ledger_id


def _options(payload: dict[str, Any]) -> dict[str, Any]:
    return _mapping(payload.get("options"))


def _update_args(payload: Any) -> tuple[int, dict[str, Any]]:
    payload = _mapping(payload)
    return _entity_id(payload), _mapping(payload.get("data"))


# Ledgers


@channel("ledgers:list")
def _list_ledgers(ctx: CallContext, payload: Any) -> Any:
    return ctx.ledgers.list_ledgers()


@channel("ledgers:add")
def _add_ledger(ctx: CallContext, payload: Any) -> Any:
    data = LedgerCreate.model_validate(_mapping(payload))
    return ctx.ledgers.add(data.name, data.description, data.currency)


@channel("ledgers:update")
def _update_ledger(ctx: CallContext, payload: Any) -> Any:
    ledger_id, data = _update_args(payload)
    changes = LedgerUpdate.model_validate(data)
    return ctx.ledgers.update(ledger_id, changes.model_dump())


@channel("ledgers:delete")
def _delete_ledger(ctx: CallContext, payload: Any) -> Any:
    return ctx.ledgers.delete(_entity_id(payload))


# Members


@channel("members:list")
def _list_members(ctx: CallContext, payload: Any) -> Any:
    if isinstance(payload, int) and not isinstance(payload, bool):
        return ctx.members.list_members(payload)
    return ctx.members.list_members(_mapping(payload).get("ledger_id"))


@channel("members:add")
def _add_member(ctx: CallContext, payload: Any) -> Any:
    data = MemberCreate.model_validate(_mapping(payload))
    return ctx.members.add(data.name, data.avatar, data.ledger_id)


@channel("members:update")
def _update_member(ctx: CallContext, payload: Any) -> Any:
    member_id, data = _update_args(payload)
    changes = MemberUpdate.model_validate(data)
    return ctx.members.update(member_id, changes.model_dump())


@channel("members:delete")
def _delete_member(ctx: CallContext, payload: Any) -> Any:
    return ctx.members.delete(_entity_id(payload))


# Records


@channel("records:list")
def _list_records(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    filters = RecordFilter.model_validate(_options(payload))
    return ctx.records.list_records(_ledger_id(payload), filters)


@channel("records:add")
def _add_record(ctx: CallContext, payload: Any) -> Any:
    return ctx.records.add(RecordCreate.model_validate(_mapping(payload)))


@channel("records:update")
def _update_record(ctx: CallContext, payload: Any) -> Any:
    record_id, data = _update_args(payload)
    return ctx.records.update(record_id, RecordUpdate.model_validate(data))


@channel("records:delete")
def _delete_record(ctx: CallContext, payload: Any) -> Any:
    return ctx.records.delete(_entity_id(payload))


@channel("records:summary")
def _record_summary(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    filters = SummaryFilter.model_validate(_options(payload))
    return ctx.records.summary(_ledger_id(payload), filters)


@channel("records:categorySummary")
def _record_category_summary(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    filters = CategorySummaryFilter.model_validate(_options(payload))
    return ctx.records.category_summary(
        _ledger_id(payload), filters, ctx.categories.as_mapping()
    )


# Budgets


@channel("budgets:list")
def _list_budgets(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    filters = BudgetFilter.model_validate(_options(payload))
    return ctx.budgets.list_budgets(_ledger_id(payload), filters)


@channel("budgets:add")
def _add_budget(ctx: CallContext, payload: Any) -> Any:
    return ctx.budgets.add(BudgetCreate.model_validate(_mapping(payload)))


@channel("budgets:set")
def _set_budget(ctx: CallContext, payload: Any) -> Any:
    return ctx.budgets.set_period_budget(BudgetPeriodSet.model_validate(_mapping(payload)))


@channel("budgets:update")
def _update_budget(ctx: CallContext, payload: Any) -> Any:
    budget_id, data = _update_args(payload)
    return ctx.budgets.update(budget_id, BudgetUpdate.model_validate(data))


@channel("budgets:delete")
def _delete_budget(ctx: CallContext, payload: Any) -> Any:
    return ctx.budgets.delete(_entity_id(payload))


@channel("budgets:execution")
def _budget_execution(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    date_range = DateRange.model_validate(_options(payload))
    return ctx.budgets.execution(_ledger_id(payload), date_range)


# Reports


@channel("reports:yearly")
def _yearly_report(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    year = payload.get("year", _options(payload).get("year"))
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidInputError("year must be an integer")
    return ctx.reports.yearly_report(_ledger_id(payload), year)


@channel("reports:budgetOverview")
def _budget_overview(ctx: CallContext, payload: Any) -> Any:
    payload = _mapping(payload)
    query = BudgetOverviewQuery.model_validate(_options(payload))
    return ctx.reports.budget_overview(_ledger_id(payload), query.period, query.year, query.month)


# Categories


@channel("categories:list")
def _list_categories(ctx: CallContext, payload: Any) -> Any:
    direction = payload if isinstance(payload, str) else _mapping(payload).get("direction")
    return [item.model_dump() for item in ctx.categories.list_categories(direction)]


@channel("categories:add")
def _add_category(ctx: CallContext, payload: Any) -> Any:
    data = CategoryCreate.model_validate(_mapping(payload))
    return ctx.categories.add(data.label, data.icon, data.direction).model_dump()


@channel("categories:delete")
def _delete_category(ctx: CallContext, payload: Any) -> Any:
    category_id = payload.get("id") if isinstance(payload, dict) else payload
    if not isinstance(category_id, str) or not category_id:
        raise InvalidInputError("id must be a category id")
    return ctx.categories.delete(category_id).model_dump()


# Backup


@channel("data:export")
def _export_data(ctx: CallContext, payload: Any) -> Any:
    return ctx.backup.export()


@channel("data:import")
def _import_data(ctx: CallContext, payload: Any) -> Any:
    return ctx.backup.import_(_mapping(payload))


class Bridge:
    """Dispatch channel calls to the services against one store."""

    def __init__(
        self,
        store: LedgerStore,
        settings: Settings | None = None,
        categories: CategoryCatalog | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or default_settings
        self.categories = categories or CategoryCatalog(self.settings.categories_file)

    @staticmethod
    def channels() -> list[str]:
        """Return every registered channel name."""
        return sorted(_HANDLERS)

    def _dispatch(self, name: str, payload: Any) -> Any:
        handler = _HANDLERS.get(name)
        if handler is None:
            raise NotFoundError(f"Channel {name!r}")
        with self.store.session() as session:
            return handler(CallContext(session, self.settings, self.categories), payload)

    def invoke(self, name: str, payload: Any = None) -> Result[Any]:
        """Run one call and return its result."""
        logger.debug("Bridge call %s", name)
        return capture(self._dispatch, name, payload)

    def call(self, name: str, payload: Any = None) -> dict[str, Any]:
        """Run one call and return its transport envelope."""
        return self.invoke(name, payload).to_envelope()
