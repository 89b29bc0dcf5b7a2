from app.core.http import ApiClient
from app.repositories.base import parse_records
from app.schemas.transaction import Transaction


class TransactionsRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, month: str | None = None) -> list[Transaction]:
        # month=None -> every transaction the user has
        payload = await self.client.get_json("/transactions", params={"month": month})
        return parse_records(payload, Transaction, "transaction")
