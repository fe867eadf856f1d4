"""Record (transaction) schemas and query filters."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, model_validator

Direction = Literal["income", "expense"]


class RecordFields(BaseModel):
    """Record fields supplied by the caller when the ledger comes from the URL."""

    member_id: int | None = None
    direction: Direction
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    date: dt.date
    note: str = Field("", max_length=500)


class RecordCreate(RecordFields):
    """Request body for adding a record."""

    ledger_id: int


class RecordUpdate(BaseModel):
    """Partial record update; omitted fields keep their stored value."""

    member_id: int | None = None
    direction: Direction | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    amount: float | None = Field(None, ge=0)
    date: dt.date | None = None
    note: str | None = Field(None, max_length=500)


class DateRange(BaseModel):
    """Inclusive ISO date range; either bound may be omitted."""

    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @model_validator(mode="after")
    def check_order(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SummaryFilter(DateRange):
    """Filter accepted by the summary aggregate."""

    member_id: int | None = None


class CategorySummaryFilter(SummaryFilter):
    """Filter accepted by the category summary aggregate."""

    direction: Direction = "expense"


class RecordFilter(SummaryFilter):
    """Filter and paging options for listing records."""

    direction: Direction | None = None
    category: str | None = None
    limit: int | None = Field(None, ge=1)
    offset: int | None = Field(None, ge=0)


class RecordResponse(BaseModel):
    """Record representation, joined with the member name."""

    id: int
    ledger_id: int
    member_id: int | None = None
    member_name: str | None = None
    direction: Direction
    category: str
    amount: float
    date: str
    note: str
    created_at: str


class SummaryResponse(BaseModel):
    """Income, expense and balance totals."""

    income: float = 0
    expense: float = 0
    balance: float = 0


class CategorySummaryItem(BaseModel):
    """One category's share of the filtered total."""

    category: str
    total: float
    count: int
    percentage: float
    label: str | None = None
    icon: str | None = None
