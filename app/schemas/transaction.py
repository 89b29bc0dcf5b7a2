from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.category import CategorySnapshot


class Transaction(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: str
    amount: float  # every transaction is an expense; only the magnitude counts
    categoryId: str | None = None
    category: CategorySnapshot | None = None
    date: str | None = None  # kept raw, month derivation tolerates junk
    notes: str | None = None
    receiptUrl: str | None = None

    @field_validator("id", "categoryId", mode="before")
    @classmethod
    def _to_str(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("category", mode="before")
    @classmethod
    def _legacy_category_name(cls, v):
        # old mock API stored the category as a bare name
        if isinstance(v, str):
            return {"name": v} if v.strip() else None
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_str(cls, v):
        return str(v) if v is not None else None
