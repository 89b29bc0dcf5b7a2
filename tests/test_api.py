import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.http import get_api_client
from app.main import app


@pytest.fixture
def client(upstream):
    upstream.transactions = [
        {"id": "t1", "amount": 500, "date": "2024-03-05", "categoryId": "food", "category": {"name": "food"}},
        {"id": "t2", "amount": 300, "date": "2024-03-20", "categoryId": "food", "category": {"name": "food"}},
        {"id": "t3", "amount": 100, "date": "2024-02-10", "categoryId": "food", "category": {"name": "food"}},
    ]
    upstream.budgets = {"2024-03": [{"id": "b1", "categoryId": "food", "budget": 1000, "spent": 800}]}

    app.dependency_overrides[get_api_client] = lambda: upstream.client()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_summary(client):
    r = client.get("/dashboard/summary", params={"month": "2024-03", "compareMonth": "2024-02"})
    assert r.status_code == 200
    body = r.json()
    assert body["totalIncome"] == 1000
    assert body["totalExpense"] == 800
    assert body["balance"] == 200
    assert body["transactionCount"] == 2
    assert body["categoryData"] == [{"name": "food", "value": 800, "percentage": 100}]
    assert body["categoryDataCompare"] == [{"name": "food", "value": 100, "percentage": 100}]
    assert body["selectedMonthKey"] == "2024-03"
    assert body["compareMonthKey"] == "2024-02"
    assert [m["monthKey"] for m in body["monthlyData"]] == ["2024-02", "2024-03"]
    assert "x-request-id" in r.headers
    assert "x-response-time-ms" in r.headers


def test_summary_with_client_id(client):
    r = client.get("/dashboard/summary", params={"month": "2024-03"}, headers={"X-Client-Id": "tab-1"})
    assert r.status_code == 200
    assert r.json()["transactionCount"] == 2


def test_pending_setup_via_api(client, upstream):
    upstream.budgets = {}
    r = client.get("/dashboard/summary", params={"month": "2024-03"})
    pending = r.json()["pendingSetup"]
    assert [(p["categoryId"], p["spent"]) for p in pending] == [("food", 800)]


@pytest.mark.parametrize("month", ["2024-3", "2024-13", "march", "2024-00"])
def test_invalid_month_is_validation_error(client, month):
    r = client.get("/dashboard/summary", params={"month": month})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert err["details"][0]["field"] == "month"


def test_transaction_source_failure_is_502(client, upstream):
    upstream.failing_paths["/transactions"] = 500
    r = client.get("/dashboard/summary", params={"month": "2024-03"}, headers={"X-Request-Id": "rid-1"})
    assert r.status_code == 502
    err = r.json()["error"]
    assert err["code"] == "UPSTREAM_ERROR"
    assert err["requestId"] == "rid-1"


def test_budget_failure_still_200(client, upstream):
    upstream.failing_paths["/budgets"] = 503
    r = client.get("/dashboard/summary", params={"month": "2024-03"})
    assert r.status_code == 200
    body = r.json()
    assert body["totalIncome"] == 0
    assert body["categoryData"][0]["value"] == 800


@pytest.mark.asyncio
async def test_superseded_request_answers_no_content(upstream):
    upstream.transactions = [
        {"id": "t1", "amount": 500, "date": "2024-03-05", "categoryId": "food", "category": {"name": "food"}},
    ]
    upstream.delay = 0.3
    app.dependency_overrides[get_api_client] = lambda: upstream.client()
    headers = {"X-Client-Id": "tab-2"}
    try:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
            first = asyncio.create_task(c.get("/dashboard/summary", params={"month": "2024-02"}, headers=headers))
            await asyncio.sleep(0.05)
            second = await c.get("/dashboard/summary", params={"month": "2024-03"}, headers=headers)
            first = await first
    finally:
        app.dependency_overrides.clear()

    assert first.status_code == 204
    assert first.content == b""
    assert second.status_code == 200
    assert second.json()["selectedMonthKey"] == "2024-03"
    assert second.json()["transactionCount"] == 1


class BrokenClient:
    base_url = "http://broken.test"
    headers = {}

    async def get_json(self, path, params=None):
        raise RuntimeError("unexpected")


def test_unexpected_error_keeps_error_envelope():
    app.dependency_overrides[get_api_client] = lambda: BrokenClient()
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/dashboard/summary", params={"month": "2024-03"}, headers={"X-Request-Id": "rid-9"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "INTERNAL_ERROR"
    assert err["requestId"] == "rid-9"
