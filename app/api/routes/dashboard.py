from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import Response

from app.core.http import ApiClient, get_api_client
from app.core.time import MONTH_KEY_PATTERN
from app.services.dashboard_service import DashboardService
from app.services.request_gate import LatestRequestGate
from app.schemas.dashboard import DashboardSummary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

# one gate per process; keyed by X-Client-Id
dashboard_gate = LatestRequestGate()


@router.get("/summary", response_model=DashboardSummary)
async def summary(
    month: str | None = Query(default=None, pattern=MONTH_KEY_PATTERN),
    compareMonth: str | None = Query(default=None, pattern=MONTH_KEY_PATTERN),
    locale: str | None = Query(default=None, pattern=r"^[a-z]{2}$"),
    x_client_id: str | None = Header(default=None),
    client: ApiClient = Depends(get_api_client),
):
    svc = DashboardService(client)
    if not x_client_id:
        return await svc.summary(month, compareMonth, locale)

    result = await dashboard_gate.run(x_client_id, lambda: svc.summary(month, compareMonth, locale))
    if result is None:
        # superseded by a newer request from the same client
        return Response(status_code=204)
    return result
