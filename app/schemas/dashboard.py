from __future__ import annotations

from pydantic import BaseModel

from app.schemas.budget import Budget, BudgetProgressDto
from app.schemas.category import CategorySnapshot
from app.schemas.transaction import Transaction


class MonthlyDataDto(BaseModel):
    monthKey: str  # YYYY-MM
    month: str     # label, "Mar 2024"
    income: float  # always 0, amounts are expenses
    expense: float
    budget: float


class CategoryDataDto(BaseModel):
    name: str
    value: float
    percentage: float  # 0..100 within the period


class PendingSetupDto(BaseModel):
    categoryId: str
    name: str
    category: CategorySnapshot | None = None
    spent: float


class DashboardSummary(BaseModel):
    # budget totals for the selected month
    totalIncome: float   # sum of allocated budgets
    totalExpense: float  # sum of budget "spent"
    balance: float

    transactionCount: int
    categoryCount: int

    monthlyData: list[MonthlyDataDto]
    categoryData: list[CategoryDataDto]
    categoryDataCompare: list[CategoryDataDto]

    selectedMonthKey: str
    compareMonthKey: str | None = None
    selectedTotalExpense: float
    selectedTotalBudget: float
    compareTotalExpense: float | None = None
    compareTotalBudget: float | None = None

    recentTransactions: list[Transaction]
    recentTransactionsMonth: list[Transaction]
    budgets: list[Budget]
    budgetProgress: list[BudgetProgressDto]
    pendingSetup: list[PendingSetupDto]
