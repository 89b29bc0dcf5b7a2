from cachetools import TTLCache

from app.core.config import settings
from app.core.http import ApiClient
from app.repositories.base import parse_records
from app.schemas.category import Category


# base_url + auth -> categories; a rename shows up once the entry expires
_CATEGORIES_CACHE = TTLCache(maxsize=128, ttl=settings.categories_cache_ttl_seconds)


def clear_categories_cache() -> None:
    _CATEGORIES_CACHE.clear()


class CategoriesRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    def _cache_key(self) -> tuple:
        return (
            self.client.base_url,
            self.client.headers.get("authorization"),
            self.client.headers.get("cookie"),
        )

    async def list(self) -> list[Category]:
        key = self._cache_key()
        cached = _CATEGORIES_CACHE.get(key)
        if cached is not None:
            return list(cached)

        payload = await self.client.get_json("/categories")
        cats = parse_records(payload, Category, "category")
        _CATEGORIES_CACHE[key] = cats
        return list(cats)
