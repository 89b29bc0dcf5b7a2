import asyncio

import httpx
import pytest

from app.core.http import ApiClient
from app.repositories.categories_repo import clear_categories_cache


class FakeUpstream:
    """In-memory stand-in for the upstream expense API, served through httpx.MockTransport."""

    base_url = "http://upstream.test"

    def __init__(self):
        self.transactions = []
        self.budgets = {}         # month -> list of budget dicts
        self.categories = []
        self.failing_paths = {}   # path -> status code
        self.failing_budget_months = set()
        self.delay = 0.0
        self.calls = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        month = request.url.params.get("month")
        self.calls.append((path, month))
        if self.delay:
            await asyncio.sleep(self.delay)

        status = self.failing_paths.get(path)
        if status:
            return httpx.Response(status, json={"message": f"{path} is down"})

        if path == "/transactions":
            return httpx.Response(200, json=self.transactions)
        if path == "/budgets":
            if month in self.failing_budget_months:
                return httpx.Response(500, json={"error": "budget store unavailable"})
            return httpx.Response(200, json={"items": self.budgets.get(month, [])})
        if path == "/categories":
            return httpx.Response(200, json=self.categories)
        return httpx.Response(404, json={"message": "not found"})

    def client(self, headers=None) -> ApiClient:
        return ApiClient(
            self.base_url,
            timeout=5,
            headers=headers,
            transport=httpx.MockTransport(self.handler),
        )

    def calls_to(self, path):
        return [month for p, month in self.calls if p == path]


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture(autouse=True)
def _fresh_categories_cache():
    clear_categories_cache()
    yield
    clear_categories_cache()
