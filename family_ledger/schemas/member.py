"""Member schemas."""

from pydantic import BaseModel, Field


class MemberCreate(BaseModel):
    """Request body for adding a member."""

    name: str = Field(..., min_length=1, max_length=100)
    avatar: str | None = Field(None, max_length=200)
    ledger_id: int | None = None


class MemberUpdate(BaseModel):
    """Partial member update."""

    name: str | None = Field(None, min_length=1, max_length=100)
    avatar: str | None = Field(None, max_length=200)


class MemberResponse(BaseModel):
    """Member representation."""

    id: int
    ledger_id: int | None = None
    name: str
    avatar: str
    created_at: str
