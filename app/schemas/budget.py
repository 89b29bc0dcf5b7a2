from pydantic import BaseModel, ConfigDict, field_validator
from typing import Literal

from app.schemas.category import CategorySnapshot

BudgetStatus = Literal["setup_required", "on_track", "warning", "over"]


class Budget(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: str
    categoryId: str
    category: CategorySnapshot | None = None
    budget: float = 0.0  # 0 = auto-created placeholder, not configured yet
    spent: float = 0.0
    month: str | None = None
    createdAt: str | None = None
    updatedAt: str | None = None

    @field_validator("id", "categoryId", mode="before")
    @classmethod
    def _to_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("budget", "spent", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0.0 if v is None else v


class BudgetProgressDto(BaseModel):
    budgetId: str
    categoryId: str
    name: str
    icon: str | None = None
    color: str | None = None
    budget: float
    spent: float
    percentage: float  # spent / budget * 100, 0 when budget is 0
    status: BudgetStatus
