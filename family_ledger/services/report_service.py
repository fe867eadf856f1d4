"""Yearly report and budget overview service."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from family_ledger.schemas.record import SummaryFilter
from family_ledger.services import aggregation
from family_ledger.services.budget_service import BudgetService
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.services.ledger_service import LedgerService
from family_ledger.services.record_service import RecordService
from family_ledger.utils.time import month_range, year_range


class ReportService:
    """Derive report shapes from the current records and budgets on every call."""

    def __init__(self, session: Session, categories: CategoryCatalog) -> None:
        self.ledgers = LedgerService(session)
        self.records = RecordService(session)
        self.budgets = BudgetService(session)
        self.categories = categories

    def yearly_report(self, ledger_id: int, year: int) -> dict[str, Any]:
        """Return totals, a twelve-month trend and category breakdowns for one year."""
        self.ledgers.ensure_exists(ledger_id)
        start, end = year_range(year)
        records = self.records.records_between(ledger_id, start, end)
        budgets = self.budgets.list_budgets(ledger_id)
        previous_start, previous_end = year_range(year - 1)
        catalog = self.categories.as_mapping()

        return {
            "year": year,
            "summary": aggregation.summarize(records),
            "previous_year_summary": self.records.summary(
                ledger_id,
                SummaryFilter(start_date=previous_start, end_date=previous_end),
            ),
            "months": aggregation.monthly_trend(records, budgets, year),
            "income_breakdown": aggregation.category_summary(records, "income", catalog),
            "expense_breakdown": aggregation.category_summary(records, "expense", catalog),
        }

    def budget_overview(
        self, ledger_id: int, period: str, year: int, month: int | None = None
    ) -> dict[str, Any]:
        """Return per-category budget vs. actual for one month or one year.

        A monthly view falls back to the derived share of the yearly budget; a
        yearly view without a yearly budget sums that year's monthly budgets.
        """
        self.ledgers.ensure_exists(ledger_id)
        if period == "monthly":
            start, end = month_range(year, month)
        else:
            start, end = year_range(year)
        records = self.records.records_between(ledger_id, start, end)
        actuals = aggregation.actuals_by_category(records)
        budgets = self.budgets.list_budgets(ledger_id)

        catalog = self.categories.as_mapping()
        keys: dict[tuple[str, str], dict[str, Any]] = {}
        for item in catalog.values():
            keys[(item.direction, item.id)] = {"label": item.label, "icon": item.icon}
        for budget in budgets:
            keys.setdefault(
                (budget["direction"], budget["category"]),
                {"label": budget["category"], "icon": "📝"},
            )

        rows = []
        for (direction, category), display in keys.items():
            if period == "monthly":
                amount = aggregation.monthly_budget_amount(
                    budgets, direction, category, year, month
                )
            else:
                amount = aggregation.yearly_budget_amount(budgets, direction, category, year)
            actual = actuals.get((direction, category), 0.0)
            rows.append(
                {
                    "category": category,
                    "label": display["label"],
                    "icon": display["icon"],
                    "direction": direction,
                    "budget": amount,
                    "actual": actual,
                    "remaining": amount - actual,
                    "percentage": aggregation.percentage_of(actual, amount),
                    "is_over_budget": direction == "expense" and amount > 0 and actual > amount,
                }
            )

        income_budget = sum(row["budget"] for row in rows if row["direction"] == "income")
        expense_budget = sum(row["budget"] for row in rows if row["direction"] == "expense")
        for row in rows:
            direction_total = income_budget if row["direction"] == "income" else expense_budget
            row["share"] = aggregation.percentage_of(row["budget"], direction_total)

        projected_balance = income_budget - expense_budget
        return {
            "period": period,
            "year": year,
            "month": month if period == "monthly" else None,
            "rows": rows,
            "totals": {
                "income_budget": income_budget,
                "expense_budget": expense_budget,
                "projected_balance": projected_balance,
                "savings_rate": aggregation.percentage_of(projected_balance, income_budget),
            },
        }
