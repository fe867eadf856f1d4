"""FastAPI dependency injection helpers."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from family_ledger.config import Settings
from family_ledger.db.store import LedgerStore
from family_ledger.services.category_service import CategoryCatalog


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


def get_store(request: Request) -> LedgerStore:
    """Return the ledger store owned by the application lifespan."""
    return request.app.state.store


def get_catalog(request: Request) -> CategoryCatalog:
    """Return the shared category catalog."""
    return request.app.state.categories


def get_session(store: LedgerStore = Depends(get_store)) -> Iterator[Session]:
    """Yield a per-request session committed after the endpoint returns."""
    with store.session() as session:
        yield session


def ok(data: Any) -> dict[str, Any]:
    """Wrap endpoint data in the success envelope."""
    return {"success": True, "data": data}
