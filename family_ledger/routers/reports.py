"""Report endpoints, nested under a ledger."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from family_ledger.dependencies import get_catalog, get_session, ok
from family_ledger.schemas.common import Envelope
from family_ledger.schemas.report import BudgetOverview, BudgetOverviewQuery, YearlyReport
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.report_service import ReportService

router = APIRouter()


@router.get("/yearly/{year}", response_model=Envelope[YearlyReport])
def yearly_report(
    ledger_id: int,
    year: int = Path(..., ge=1900, le=9999),
    session: Session = Depends(get_session),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Return the year's totals, monthly trend and category breakdowns."""
    return ok(ReportService(session, catalog).yearly_report(ledger_id, year))


@router.get("/budget-overview", response_model=Envelope[BudgetOverview])
def budget_overview(
    ledger_id: int,
    year: int = Query(..., ge=1900, le=9999),
    period: Literal["monthly", "yearly"] = Query(default="yearly"),
    month: int | None = Query(default=None, ge=1, le=12),
    session: Session = Depends(get_session),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Return budget against actual activity per category for a month or a year."""
    query = BudgetOverviewQuery(period=period, year=year, month=month)
    service = ReportService(session, catalog)
    return ok(service.budget_overview(ledger_id, query.period, query.year, query.month))
