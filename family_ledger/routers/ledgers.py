"""Ledger endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_ledger.config import Settings
from family_ledger.dependencies import get_session, get_settings, ok
from family_ledger.schemas.common import Envelope, MutationResult
from family_ledger.schemas.ledger import LedgerCreate, LedgerResponse, LedgerUpdate
from family_ledger.services.ledger_service import LedgerService

router = APIRouter()


@router.get("", response_model=Envelope[list[LedgerResponse]])
def list_ledgers(session: Session = Depends(get_session)) -> dict:
    """Return every ledger, newest first."""
    return ok(LedgerService(session).list_ledgers())


@router.post(
    "", response_model=Envelope[LedgerResponse], status_code=status.HTTP_201_CREATED
)
def create_ledger(
    payload: LedgerCreate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Create a ledger."""
    service = LedgerService(session, default_currency=app_settings.default_currency)
    return ok(service.add(payload.name, payload.description, payload.currency))


@router.patch("/{ledger_id}", response_model=Envelope[MutationResult])
def update_ledger(
    ledger_id: int,
    payload: LedgerUpdate,
    session: Session = Depends(get_session),
) -> dict:
    """Rename or re-describe a ledger."""
    return ok(LedgerService(session).update(ledger_id, payload.model_dump()))


@router.delete("/{ledger_id}", response_model=Envelope[MutationResult])
def delete_ledger(ledger_id: int, session: Session = Depends(get_session)) -> dict:
    """Delete a ledger with its records and budgets."""
    return ok(LedgerService(session).delete(ledger_id))
