"""Budget schemas."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from family_ledger.schemas.record import Direction
from family_ledger.utils.time import utc_today

Period = Literal["monthly", "quarterly", "yearly"]


class BudgetFields(BaseModel):
    """Budget fields supplied by the caller when the ledger comes from the URL."""

    member_id: int | None = None
    direction: Direction
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    period: Period
    date: dt.date = Field(default_factory=utc_today)


class BudgetCreate(BudgetFields):
    """Request body for adding a budget (upserted by ledger and category)."""

    ledger_id: int


class BudgetUpdate(BaseModel):
    """Partial budget update."""

    member_id: int | None = None
    direction: Direction | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    amount: float | None = Field(None, ge=0)
    period: Period | None = None
    date: dt.date | None = None


class BudgetFilter(BaseModel):
    """Pass-through filters for listing budgets."""

    direction: Direction | None = None
    period: Period | None = None
    member_id: int | None = None


class BudgetPeriodFields(BaseModel):
    """A budget for one explicit period instance (a year, quarter or month)."""

    member_id: int | None = None
    direction: Direction
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    period: Period
    year: int = Field(..., ge=1900, le=9999)
    month: int | None = Field(None, ge=1, le=12)

    @model_validator(mode="after")
    def check_month(self):
        if self.period == "yearly":
            self.month = None
        elif self.month is None:
            raise ValueError(f"month is required for {self.period} budgets")
        return self


class BudgetPeriodSet(BudgetPeriodFields):
    """Request body for setting a period budget on a ledger."""

    ledger_id: int


class BudgetResponse(BaseModel):
    """Budget representation, joined with the member name."""

    id: int
    ledger_id: int
    member_id: int | None = None
    member_name: str | None = None
    direction: Direction
    category: str
    amount: float
    period: Period
    date: str


class BudgetExecutionRow(BudgetResponse):
    """A budget row enriched with actual activity for the reporting range."""

    actual: float
    remaining: float
    percentage: float
    is_over_budget: bool
