from pydantic import BaseModel, ConfigDict, field_validator


class CategorySnapshot(BaseModel):
    # copy of the category display fields stored on a transaction/budget at write time;
    # any extra name_<locale> variant is kept
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str | None = None
    name_en: str | None = None
    name_hi: str | None = None
    name_mr: str | None = None
    icon: str | None = None
    color: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        return str(v) if v is not None else None

    def localized_name(self, locale: str | None = None) -> str | None:
        if locale:
            localized = getattr(self, f"name_{locale}", None)
            if isinstance(localized, str) and localized:
                return localized
        return self.name or None


class Category(CategorySnapshot):
    """Live category record as served by the categories endpoint."""

    id: str
