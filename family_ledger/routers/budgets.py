"""Budget endpoints, nested under a ledger."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from family_ledger.config import Settings
from family_ledger.dependencies import get_session, get_settings, ok
from family_ledger.schemas.budget import (
    BudgetCreate,
    BudgetExecutionRow,
    BudgetFields,
    BudgetFilter,
    BudgetPeriodFields,
    BudgetPeriodSet,
    BudgetResponse,
    BudgetUpdate,
    Period,
)
from family_ledger.schemas.common import Envelope, MutationResult
from family_ledger.schemas.record import DateRange, Direction
from family_ledger.services.budget_service import BudgetService

router = APIRouter()


def _service(session: Session, app_settings: Settings) -> BudgetService:
    return BudgetService(session, member_scope=app_settings.member_scope)


@router.get("", response_model=Envelope[list[BudgetResponse]])
def list_budgets(
    ledger_id: int,
    direction: Direction | None = Query(default=None),
    period: Period | None = Query(default=None),
    member_id: int | None = Query(default=None),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Return the ledger's budgets ordered by category."""
    filters = BudgetFilter(direction=direction, period=period, member_id=member_id)
    return ok(_service(session, app_settings).list_budgets(ledger_id, filters))


@router.post(
    "", response_model=Envelope[BudgetResponse], status_code=status.HTTP_201_CREATED
)
def create_budget(
    ledger_id: int,
    payload: BudgetFields,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Add a budget, replacing the one already set for the same category."""
    data = BudgetCreate(ledger_id=ledger_id, **payload.model_dump())
    return ok(_service(session, app_settings).add(data))


@router.put("/period", response_model=Envelope[BudgetResponse | None])
def set_period_budget(
    ledger_id: int,
    payload: BudgetPeriodFields,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Set the budget of one month, quarter or year; an amount of 0 clears it."""
    data = BudgetPeriodSet(ledger_id=ledger_id, **payload.model_dump())
    return ok(_service(session, app_settings).set_period_budget(data))


@router.get("/execution", response_model=Envelope[list[BudgetExecutionRow]])
def budget_execution(
    ledger_id: int,
    start_date: dt.date | None = Query(default=None),
    end_date: dt.date | None = Query(default=None),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Return every budget with the actual activity of the date range."""
    date_range = DateRange(start_date=start_date, end_date=end_date)
    return ok(_service(session, app_settings).execution(ledger_id, date_range))


@router.patch("/{budget_id}", response_model=Envelope[MutationResult])
def update_budget(
    ledger_id: int,
    budget_id: int,
    payload: BudgetUpdate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    return ok(_service(session, app_settings).update(budget_id, payload, ledger_id=ledger_id))


@router.delete("/{budget_id}", response_model=Envelope[MutationResult])
def delete_budget(
    ledger_id: int,
    budget_id: int,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    return ok(_service(session, app_settings).delete(budget_id, ledger_id=ledger_id))
