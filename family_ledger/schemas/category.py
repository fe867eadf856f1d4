"""Category schemas."""

from pydantic import BaseModel, Field

from family_ledger.schemas.record import Direction


class Category(BaseModel):
    """A classification label attached to records and budgets."""

    id: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=100)
    icon: str = "📝"
    direction: Direction
    is_default: bool = False


class CategoryCreate(BaseModel):
    """Request body for adding a custom category."""

    label: str = Field(..., min_length=1, max_length=100)
    icon: str = Field("📝", max_length=20)
    direction: Direction
