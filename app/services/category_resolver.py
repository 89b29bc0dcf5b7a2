from __future__ import annotations

from typing import Iterable, Optional

from app.core.config import settings
from app.schemas.category import Category, CategorySnapshot


class CategoryResolver:
    """
    Best-effort display name for a category reference.

    Order: live category looked up by id -> snapshot embedded in the record -> fallback label.
    Snapshots can be stale after a rename, the live record wins when we have it.
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        locale: Optional[str] = None,
        fallback: Optional[str] = None,
    ) -> None:
        self.locale = locale
        self.fallback = fallback or settings.uncategorized_label
        self._by_id: dict[str, Category] = {c.id: c for c in categories}

    def live(self, category_id: Optional[str]) -> Optional[Category]:
        if not category_id:
            return None
        return self._by_id.get(category_id)

    def resolve(self, category_id: Optional[str], snapshot: Optional[CategorySnapshot]) -> str:
        for cat in (self.live(category_id), snapshot):
            if cat is None:
                continue
            name = cat.localized_name(self.locale)
            if name:
                return name
        return self.fallback

    def display(self, category_id: Optional[str], snapshot: Optional[CategorySnapshot]) -> Optional[CategorySnapshot]:
        # icon/color source for a row
        return self.live(category_id) or snapshot
