"""Backup endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from family_ledger.dependencies import get_catalog, get_session, ok
from family_ledger.schemas.backup import BackupDocument
from family_ledger.schemas.common import Envelope
from family_ledger.services.backup_service import BackupService
from family_ledger.services.category_service import CategoryCatalog

router = APIRouter()


@router.get("/export", response_model=Envelope[BackupDocument])
def export_data(
    session: Session = Depends(get_session),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Return a full backup document."""
    return ok(BackupService(session, catalog).export())


@router.post("/import", response_model=Envelope[dict[str, int]])
def import_data(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Replace every stored row with the contents of a backup document."""
    return ok(BackupService(session, catalog).import_(payload))
