"""Category catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from family_ledger.dependencies import get_catalog, ok
from family_ledger.schemas.category import Category, CategoryCreate
from family_ledger.schemas.common import Envelope
from family_ledger.schemas.record import Direction
from family_ledger.services.category_service import CategoryCatalog

router = APIRouter()


@router.get("", response_model=Envelope[list[Category]])
def list_categories(
    direction: Direction | None = Query(default=None),
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Return default and custom categories."""
    return ok([item.model_dump() for item in catalog.list_categories(direction)])


@router.post("", response_model=Envelope[Category], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Add a custom category."""
    return ok(catalog.add(payload.label, payload.icon, payload.direction).model_dump())


@router.delete("/{category_id}", response_model=Envelope[Category])
def delete_category(
    category_id: str,
    catalog: CategoryCatalog = Depends(get_catalog),
) -> dict:
    """Remove a custom category."""
    return ok(catalog.delete(category_id).model_dump())
