"""Ledger ("book") schemas."""

from pydantic import BaseModel, Field


class LedgerCreate(BaseModel):
    """Request body for creating a ledger."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    currency: str | None = Field(None, min_length=1, max_length=10)


class LedgerUpdate(BaseModel):
    """Partial ledger update; omitted fields keep their stored value."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    currency: str | None = Field(None, min_length=1, max_length=10)


class LedgerResponse(BaseModel):
    """Ledger representation."""

    id: int
    name: str
    description: str
    currency: str
    created_at: str
