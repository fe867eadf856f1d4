"""Member endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from family_ledger.config import Settings
from family_ledger.dependencies import get_session, get_settings, ok
from family_ledger.schemas.common import Envelope, MutationResult
from family_ledger.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from family_ledger.services.member_service import MemberService

router = APIRouter()


def _service(session: Session, app_settings: Settings) -> MemberService:
    return MemberService(session, scope=app_settings.member_scope)


@router.get("", response_model=Envelope[list[MemberResponse]])
def list_members(
    ledger_id: int | None = Query(default=None),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """List members; ``ledger_id`` is required when members are scoped per ledger."""
    return ok(_service(session, app_settings).list_members(ledger_id))


@router.post(
    "", response_model=Envelope[MemberResponse], status_code=status.HTTP_201_CREATED
)
def create_member(
    payload: MemberCreate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Add a member."""
    service = _service(session, app_settings)
    return ok(service.add(payload.name, payload.avatar, payload.ledger_id))


@router.patch("/{member_id}", response_model=Envelope[MutationResult])
def update_member(
    member_id: int,
    payload: MemberUpdate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    return ok(_service(session, app_settings).update(member_id, payload.model_dump()))


@router.delete("/{member_id}", response_model=Envelope[MutationResult])
def delete_member(
    member_id: int,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> dict:
    """Delete a member; their records and budgets are kept without a member."""
    return ok(_service(session, app_settings).delete(member_id))
