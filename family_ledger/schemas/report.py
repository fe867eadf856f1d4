"""Report schemas."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from family_ledger.schemas.record import CategorySummaryItem, Direction, SummaryResponse


class MonthRow(BaseModel):
    """Income, expense and expense budget for one month of a yearly report."""

    month: int
    income: float
    expense: float
    budget: float
    net: float
    balance: float


class YearlyReport(BaseModel):
    """Year-at-a-glance totals, monthly trend and category breakdowns."""

    year: int
    summary: SummaryResponse
    previous_year_summary: SummaryResponse
    months: list[MonthRow]
    income_breakdown: list[CategorySummaryItem]
    expense_breakdown: list[CategorySummaryItem]


class BudgetOverviewQuery(BaseModel):
    """Which period instance a budget overview covers."""

    period: Literal["monthly", "yearly"] = "yearly"
    year: int = Field(..., ge=1900, le=9999)
    month: int | None = Field(None, ge=1, le=12)

    @model_validator(mode="after")
    def check_month(self):
        if self.period == "monthly" and self.month is None:
            raise ValueError("month is required for a monthly overview")
        return self


class BudgetOverviewRow(BaseModel):
    """Budget against actual activity for one category."""

    category: str
    label: str
    icon: str
    direction: Direction
    budget: float
    actual: float
    remaining: float
    percentage: float
    share: float
    is_over_budget: bool


class BudgetOverviewTotals(BaseModel):
    """Planned totals across every category of the overview."""

    income_budget: float
    expense_budget: float
    projected_balance: float
    savings_rate: float


class BudgetOverview(BaseModel):
    """Per-category budget overview for a month or a year."""

    period: str
    year: int
    month: int | None = None
    rows: list[BudgetOverviewRow]
    totals: BudgetOverviewTotals
