"""
Dashboard analytics.

Pure functions from already-fetched transactions/budgets to a DashboardSummary.
Nothing here does I/O or keeps state between calls, the inputs are never mutated.

Conventions:
  * every transaction is an expense, counted by abs(amount)
  * "income" totals are budget allocations, "expense" totals are budget "spent"
  * distribution groups by resolved category name, pending setup groups by categoryId
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from app.core.config import settings
from app.core.time import current_month_key, month_key_of, month_label
from app.schemas.budget import Budget, BudgetProgressDto, BudgetStatus
from app.schemas.category import Category
from app.schemas.dashboard import CategoryDataDto, DashboardSummary, MonthlyDataDto, PendingSetupDto
from app.schemas.transaction import Transaction
from app.services.category_resolver import CategoryResolver


def _percent(part: float, whole: float) -> float:
    return (part * 100.0 / whole) if whole > 0 else 0.0


def transactions_in_month(transactions: Iterable[Transaction], month_key: Optional[str]) -> list[Transaction]:
    if not month_key:
        return []
    return [t for t in transactions if month_key_of(t.date) == month_key]


def monthly_expense_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for t in transactions:
        key = month_key_of(t.date)
        if key is None:
            continue
        totals[key] = totals.get(key, 0.0) + abs(t.amount)
    return totals


def latest_month_keys(month_keys: Iterable[str], limit: int) -> list[str]:
    """Most recent `limit` keys, oldest first."""
    keys = sorted(set(month_keys), reverse=True)[: max(limit, 0)]
    keys.reverse()
    return keys


def trend_month_keys(transactions: Iterable[Transaction], limit: Optional[int] = None) -> list[str]:
    limit = settings.trend_months if limit is None else limit
    return latest_month_keys(monthly_expense_totals(transactions), limit)


def category_distribution(
    transactions: Iterable[Transaction], resolver: CategoryResolver
) -> tuple[list[CategoryDataDto], float]:
    by_name: dict[str, float] = {}
    for t in transactions:
        name = resolver.resolve(t.categoryId, t.category)
        by_name[name] = by_name.get(name, 0.0) + abs(t.amount)

    total = sum(by_name.values())
    items = [
        CategoryDataDto(name=name, value=value, percentage=_percent(value, total))
        for name, value in by_name.items()
    ]
    items.sort(key=lambda x: -x.value)
    return items, total


def pending_setup(
    transactions: Iterable[Transaction], budgets: Iterable[Budget], resolver: CategoryResolver
) -> list[PendingSetupDto]:
    budgeted = {b.categoryId for b in budgets}

    spent: dict[str, float] = {}
    sample: dict[str, Transaction] = {}
    for t in transactions:
        cid = t.categoryId
        if not cid or cid in budgeted:
            continue
        spent[cid] = spent.get(cid, 0.0) + abs(t.amount)
        sample.setdefault(cid, t)

    return [
        PendingSetupDto(
            categoryId=cid,
            name=resolver.resolve(cid, sample[cid].category),
            category=sample[cid].category,
            spent=total,
        )
        for cid, total in spent.items()
    ]


def budget_status(limit: float, spent: float, threshold: Optional[float] = None) -> BudgetStatus:
    threshold = settings.budget_alert_threshold if threshold is None else threshold
    if limit <= 0:
        return "setup_required"
    if spent > limit:
        return "over"
    if _percent(spent, limit) >= threshold:
        return "warning"
    return "on_track"


def budget_progress(
    budgets: Iterable[Budget], resolver: CategoryResolver, threshold: Optional[float] = None
) -> list[BudgetProgressDto]:
    items = []
    for b in budgets:
        shown = resolver.display(b.categoryId, b.category)
        items.append(
            BudgetProgressDto(
                budgetId=b.id,
                categoryId=b.categoryId,
                name=resolver.resolve(b.categoryId, b.category),
                icon=shown.icon if shown else None,
                color=shown.color if shown else None,
                budget=b.budget,
                spent=b.spent,
                percentage=_percent(b.spent, b.budget),
                status=budget_status(b.budget, b.spent, threshold),
            )
        )
    return items


def aggregate(
    all_transactions: Optional[Iterable[Transaction]],
    primary_budgets: Optional[Iterable[Budget]],
    compare_budgets: Optional[Iterable[Budget]] = None,
    primary_month_key: Optional[str] = None,
    compare_month_key: Optional[str] = None,
    monthly_budget_totals: Optional[Mapping[str, float]] = None,
    *,
    categories: Iterable[Category] = (),
    locale: Optional[str] = None,
    trend_months: Optional[int] = None,
    recent_limit: Optional[int] = None,
    budget_alert_threshold: Optional[float] = None,
) -> DashboardSummary:
    """
    Build the dashboard summary for `primary_month_key` (current month if omitted).

    `all_transactions` must be the unfiltered collection, the trend spans several months.
    Missing budget lists (failed fetch) count as empty. `monthly_budget_totals` maps
    month key -> sum of allocated budgets for the trend months; absent keys are 0.
    """
    transactions = list(all_transactions or [])
    budgets = list(primary_budgets or [])
    compare = list(compare_budgets or [])
    budget_totals = monthly_budget_totals or {}
    trend_months = settings.trend_months if trend_months is None else trend_months
    recent_limit = settings.recent_transactions_limit if recent_limit is None else recent_limit

    month_key = primary_month_key or current_month_key()
    resolver = CategoryResolver(categories, locale=locale)

    total_income = sum(b.budget for b in budgets)
    total_expense = sum(b.spent for b in budgets)

    expense_by_month = monthly_expense_totals(transactions)
    monthly_data = [
        MonthlyDataDto(
            monthKey=key,
            month=month_label(key),
            income=0.0,
            expense=expense_by_month[key],
            budget=float(budget_totals.get(key) or 0.0),
        )
        for key in latest_month_keys(expense_by_month, trend_months)
    ]

    month_txs = transactions_in_month(transactions, month_key)
    category_data, selected_total_expense = category_distribution(month_txs, resolver)

    category_data_compare: list[CategoryDataDto] = []
    compare_total_expense = None
    if compare_month_key:
        compare_txs = transactions_in_month(transactions, compare_month_key)
        category_data_compare, compare_total_expense = category_distribution(compare_txs, resolver)

    # scoped to every transaction, not just the selected month
    category_count = len({resolver.resolve(t.categoryId, t.category) for t in transactions})

    return DashboardSummary(
        totalIncome=total_income,
        totalExpense=total_expense,
        balance=total_income - total_expense,
        transactionCount=len(month_txs),
        categoryCount=category_count,
        monthlyData=monthly_data,
        categoryData=category_data,
        categoryDataCompare=category_data_compare,
        selectedMonthKey=month_key,
        compareMonthKey=compare_month_key,
        selectedTotalExpense=selected_total_expense,
        selectedTotalBudget=total_income,
        compareTotalExpense=compare_total_expense,
        compareTotalBudget=sum(b.budget for b in compare) if compare else None,
        recentTransactions=transactions[:recent_limit],
        recentTransactionsMonth=month_txs[:recent_limit],
        budgets=budgets,
        budgetProgress=budget_progress(budgets, resolver, budget_alert_threshold),
        pendingSetup=pending_setup(month_txs, budgets, resolver),
    )
