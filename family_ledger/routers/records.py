"""Record endpoints, nested under a ledger."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from family_ledger.config import Settings
from family_ledger.dependencies import get_catalog, get_session, get_settings, ok
from family_ledger.schemas.common import Envelope, MutationResult
from family_ledger.schemas.record import (
    CategorySummaryFilter,
    CategorySummaryItem,
    Direction,
    RecordCreate,
    RecordFields,
    RecordFilter,
    RecordResponse,
    RecordUpdate,
    SummaryFilter,
    SummaryResponse,
)
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.record_service import RecordService

router = APIRouter()


def _service(session: Session, app_settings: Settings) -> RecordService:
    return RecordService(
        session,
        max_page_size=app_settings.max_page_size,
        member_scope=app_settings.member_scope,
    )


@router.get("", response_model=Envelope[list[RecordResponse]])
def list_records(
    ledger_id: int,
    start_date: dt.date | None = Query(default=None),
    end_date: dt.date | None = Query(default=None),
    member_id: int | None = Query(default=None),
    direction: Direction | None = Query(default=None),
    category: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int | None = Query(default=None, ge=0),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Return the ledger's records, newest first."""
    filters = RecordFilter(
        start_date=start_date,
        end_date=end_date,
        member_id=member_id,
        direction=direction,
        category=category,
        limit=limit,
        offset=offset,
    )
    return ok(_service(session, app_settings).list_records(ledger_id, filters))


@router.post(
    "", response_model=Envelope[RecordResponse], status_code=status.HTTP_201_CREATED
)
def create_record(
    ledger_id: int,
    payload: RecordFields,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Add a record to the ledger."""
    data = RecordCreate(ledger_id=ledger_id, **payload.model_dump())
    return ok(_service(session, app_settings).add(data))


@router.get("/summary", response_model=Envelope[SummaryResponse])
def record_summary(
    ledger_id: int,
    start_date: dt.date | None = Query(default=None),
    end_date: dt.date | None = Query(default=None),
    member_id: int | None = Query(default=None),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Return income, expense and balance over the filtered records."""
    filters = SummaryFilter(start_date=start_date, end_date=end_date, member_id=member_id)
    return ok(_service(session, app_settings).summary(ledger_id, filters))


@router.get("/category-summary", response_model=Envelope[list[CategorySummaryItem]])
def record_category_summary(
    ledger_id: int,
    direction: Direction = Query(default="expense"),
    start_date: dt.date | None = Query(default=None),
    end_date: dt.date | None = Query(default=None),
    member_id: int | None = Query(default=None),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Return per-category totals and percentages for one direction."""
    filters = CategorySummaryFilter(
        direction=direction, start_date=start_date, end_date=end_date, member_id=member_id
    )
    service = _service(session, app_settings)
    return ok(service.category_summary(ledger_id, filters, catalog.as_mapping()))


@router.patch("/{record_id}", response_model=Envelope[MutationResult])
def update_record(
    ledger_id: int,
    record_id: int,
    payload: RecordUpdate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    return ok(_service(session, app_settings).update(record_id, payload, ledger_id=ledger_id))


@router.delete("/{record_id}", response_model=Envelope[MutationResult])
def delete_record(
    ledger_id: int,
    record_id: int,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    return ok(_service(session, app_settings).delete(record_id, ledger_id=ledger_id))
