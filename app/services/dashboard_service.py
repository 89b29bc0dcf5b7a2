from __future__ import annotations

import asyncio
import logging

from app.core.config import settings
from app.core.http import ApiClient
from app.core.time import current_month_key
from app.repositories.budgets_repo import BudgetsRepo
from app.repositories.categories_repo import CategoriesRepo
from app.repositories.transactions_repo import TransactionsRepo
from app.schemas.budget import Budget
from app.schemas.category import Category
from app.schemas.dashboard import DashboardSummary
from app.services.analytics import aggregate, trend_month_keys

log = logging.getLogger(__name__)


async def _no_budgets() -> list[Budget]:
    return []


class DashboardService:
    def __init__(self, client: ApiClient):
        self.client = client
        self.tx_repo = TransactionsRepo(client)
        self.budgets_repo = BudgetsRepo(client)
        self.cat_repo = CategoriesRepo(client)

    async def _budgets_or_empty(self, month: str) -> list[Budget]:
        # a budget outage must not blank the dashboard
        try:
            return await self.budgets_repo.list(month)
        except Exception as e:
            log.warning("Budgets for %s unavailable, using none: %s", month, e)
            return []

    async def _categories_or_empty(self) -> list[Category]:
        try:
            return await self.cat_repo.list()
        except Exception as e:
            log.warning("Categories unavailable, falling back to snapshots: %s", e)
            return []

    async def _budget_total(self, month: str) -> float:
        budgets = await self._budgets_or_empty(month)
        return sum(b.budget or 0.0 for b in budgets)

    async def summary(
        self,
        month: str | None = None,
        compare_month: str | None = None,
        locale: str | None = None,
    ) -> DashboardSummary:
        month = month or current_month_key()

        # 1) independent reads; only the transaction read may fail the request
        transactions, budgets, compare_budgets, categories = await asyncio.gather(
            self.tx_repo.list(),
            self._budgets_or_empty(month),
            self._budgets_or_empty(compare_month) if compare_month else _no_budgets(),
            self._categories_or_empty(),
            return_exceptions=True,
        )
        if isinstance(transactions, BaseException):
            raise transactions
        if isinstance(budgets, BaseException):
            budgets = []
        if isinstance(compare_budgets, BaseException):
            compare_budgets = []
        if isinstance(categories, BaseException):
            categories = []

        # 2) allocated budget per trend month, one read per month
        trend_keys = trend_month_keys(transactions, settings.trend_months)
        totals = await asyncio.gather(*(self._budget_total(k) for k in trend_keys))
        monthly_budget_totals = dict(zip(trend_keys, totals))

        log.info(
            "dashboard month=%s compare=%s transactions=%d budgets=%d trend_months=%d",
            month, compare_month, len(transactions), len(budgets), len(trend_keys),
        )

        return aggregate(
            transactions,
            budgets,
            compare_budgets,
            primary_month_key=month,
            compare_month_key=compare_month,
            monthly_budget_totals=monthly_budget_totals,
            categories=categories,
            locale=locale,
            trend_months=settings.trend_months,
            recent_limit=settings.recent_transactions_limit,
            budget_alert_threshold=settings.budget_alert_threshold,
        )
