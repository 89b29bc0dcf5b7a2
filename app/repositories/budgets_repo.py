from app.core.http import ApiClient
from app.repositories.base import parse_records
from app.schemas.budget import Budget


class BudgetsRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, month: str | None = None) -> list[Budget]:
        # upstream defaults to the current month when month is omitted
        payload = await self.client.get_json("/budgets", params={"month": month})
        return parse_records(payload, Budget, "budget")
