"""Summary, category breakdown and budget reconciliation rules.

Every function here is a pure computation over already-loaded rows (plain
mappings with ``direction``, ``category`` and ``amount`` keys, plus ``period``
and ``date`` for budgets). Empty inputs produce zero-valued output and zero
denominators yield 0 instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from family_ledger.schemas.category import Category

Row = Mapping[str, Any]
ActualKey = tuple[str, str]

MONTHS_PER_YEAR = 12


def percentage_of(part: float, whole: float) -> float:
    """Return ``part / whole`` as a percentage rounded to 2 places, 0 for a zero whole."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def summary_from_totals(totals: Mapping[str, float]) -> dict[str, float]:
    """Build ``{income, expense, balance}`` from per-direction sums."""
    income = float(totals.get("income") or 0)
    expense = float(totals.get("expense") or 0)
    return {"income": income, "expense": expense, "balance": income - expense}


def summarize(records: Iterable[Row]) -> dict[str, float]:
    """Sum income and expense amounts of ``records``."""
    totals = {"income": 0.0, "expense": 0.0}
    for record in records:
        totals[record["direction"]] += float(record["amount"])
    return summary_from_totals(totals)


def category_breakdown(
    groups: Iterable[Row],
    grand_total: float,
    categories: Mapping[str, Category] | None = None,
) -> list[dict[str, Any]]:
    """Attach percentages to pre-grouped ``{category, total, count}`` rows and sort them.

    Rows are ordered by total descending, then category code ascending.
    """
    rows = []
    for group in groups:
        total = float(group["total"] or 0)
        row: dict[str, Any] = {
            "category": group["category"],
            "total": total,
            "count": int(group["count"]),
            "percentage": percentage_of(total, grand_total),
        }
        if categories is not None:
            known = categories.get(group["category"])
            row["label"] = known.label if known else group["category"]
            row["icon"] = known.icon if known else None
        rows.append(row)
    rows.sort(key=lambda item: (-item["total"], item["category"]))
    return rows


def category_summary(
    records: Iterable[Row],
    direction: str,
    categories: Mapping[str, Category] | None = None,
) -> list[dict[str, Any]]:
    """Group ``records`` of one direction by category with totals, counts and shares."""
    grouped: dict[str, dict[str, Any]] = {}
    grand_total = 0.0
    for record in records:
        if record["direction"] != direction:
            continue
        amount = float(record["amount"])
        grand_total += amount
        group = grouped.setdefault(
            record["category"], {"category": record["category"], "total": 0.0, "count": 0}
        )
        group["total"] += amount
        group["count"] += 1
    return category_breakdown(grouped.values(), grand_total, categories)


def actuals_by_category(records: Iterable[Row]) -> dict[ActualKey, float]:
    """Sum record amounts keyed by ``(direction, category)``."""
    actuals: dict[ActualKey, float] = {}
    for record in records:
        key = (record["direction"], record["category"])
        actuals[key] = actuals.get(key, 0.0) + float(record["amount"])
    return actuals


def budget_execution(
    budgets: Iterable[Row], actuals: Mapping[ActualKey, float]
) -> list[dict[str, Any]]:
    """Enrich every budget with actual, remaining, percentage and the over-budget flag.

    Actuals are matched on ``(direction, category)`` only, so a member-level
    budget is compared against the ledger-wide category total.
    """
    rows = []
    for budget in budgets:
        amount = float(budget["amount"])
        actual = float(actuals.get((budget["direction"], budget["category"]), 0) or 0)
        remaining = amount - actual
        rows.append(
            {
                **budget,
                "actual": actual,
                "remaining": remaining,
                "percentage": percentage_of(actual, amount),
                "is_over_budget": remaining < 0,
            }
        )
    return rows


def budget_year(budget: Row) -> int:
    return int(str(budget["date"])[0:4])


def budget_month(budget: Row) -> int:
    return int(str(budget["date"])[5:7])


def _scoped(budgets: Iterable[Row], direction: str, category: str, year: int) -> list[Row]:
    return [
        budget
        for budget in budgets
        if budget["direction"] == direction
        and budget["category"] == category
        and budget_year(budget) == year
    ]


def derived_monthly_budget(
    budgets: Iterable[Row], direction: str, category: str, year: int
) -> float:
    """Spread what the yearly budgets leave over the months without a monthly budget.

    ``(sum(yearly) - sum(explicit monthly)) / months_without_budget``, or 0 when
    every month of the year already has an explicit monthly budget.
    """
    scoped = _scoped(budgets, direction, category, year)
    monthly = [budget for budget in scoped if budget["period"] == "monthly"]
    total_monthly_set = sum(float(budget["amount"]) for budget in monthly)
    total_yearly = sum(float(budget["amount"]) for budget in scoped if budget["period"] == "yearly")
    months_without_budget = MONTHS_PER_YEAR - len({budget_month(budget) for budget in monthly})
    if months_without_budget <= 0:
        return 0.0
    return (total_yearly - total_monthly_set) / months_without_budget


def monthly_budget_amount(
    budgets: Iterable[Row], direction: str, category: str, year: int, month: int
) -> float:
    """Return the explicit monthly budget for a month, else the derived yearly share."""
    budgets = list(budgets)
    explicit = [
        budget
        for budget in _scoped(budgets, direction, category, year)
        if budget["period"] == "monthly" and budget_month(budget) == month
    ]
    if explicit:
        return sum(float(budget["amount"]) for budget in explicit)
    return derived_monthly_budget(budgets, direction, category, year)


def yearly_budget_amount(budgets: Iterable[Row], direction: str, category: str, year: int) -> float:
    """Return the explicit yearly budget, else the sum of the year's monthly budgets."""
    scoped = _scoped(budgets, direction, category, year)
    yearly = [budget for budget in scoped if budget["period"] == "yearly"]
    if yearly:
        return sum(float(budget["amount"]) for budget in yearly)
    return sum(float(budget["amount"]) for budget in scoped if budget["period"] == "monthly")


def monthly_trend(
    records: Iterable[Row], budgets: Iterable[Row], year: int, budget_direction: str = "expense"
) -> list[dict[str, Any]]:
    """Return twelve month rows with income, expense, budget, net and running balance.

    ``records`` must already be restricted to ``year``. The budget column sums,
    over every category with a budget that year, the month's explicit budget or
    its derived share of the yearly budget.
    """
    budgets = list(budgets)
    income = [0.0] * MONTHS_PER_YEAR
    expense = [0.0] * MONTHS_PER_YEAR
    for record in records:
        index = int(str(record["date"])[5:7]) - 1
        if record["direction"] == "income":
            income[index] += float(record["amount"])
        else:
            expense[index] += float(record["amount"])

    budget_categories = sorted(
        {
            budget["category"]
            for budget in budgets
            if budget["direction"] == budget_direction and budget_year(budget) == year
        }
    )

    rows = []
    running_balance = 0.0
    for index in range(MONTHS_PER_YEAR):
        month = index + 1
        budget_total = sum(
            monthly_budget_amount(budgets, budget_direction, category, year, month)
            for category in budget_categories
        )
        net = income[index] - expense[index]
        running_balance += net
        rows.append(
            {
                "month": month,
                "income": income[index],
                "expense": expense[index],
                "budget": budget_total,
                "net": net,
                "balance": running_balance,
            }
        )
    return rows
