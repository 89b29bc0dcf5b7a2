from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from fastapi import Request
from httpx import HTTPStatusError, RequestError

from app.core.config import settings
from app.core.errors import UpstreamError

# headers copied from the incoming request to the upstream API
FORWARDED_HEADERS = ("authorization", "cookie")


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        msg = data.get("message") or data.get("error")
        if isinstance(msg, str) and msg:
            return msg
    return f"Request failed with status {response.status_code}"


class ApiClient:
    """Thin JSON reader over the upstream expense API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._transport = transport

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        headers = {"Accept": "application/json", **self.headers}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                r = await client.get(path, params=query, headers=headers)
                r.raise_for_status()
                return r.json()
        except HTTPStatusError as e:
            raise UpstreamError(_error_message(e.response), upstream_status=e.response.status_code, path=path) from e
        except RequestError as e:
            raise UpstreamError(f"Network request to {path} failed", path=path) from e
        except ValueError as e:
            raise UpstreamError(f"Response from {path} is not valid JSON", path=path) from e


def get_api_client(request: Request) -> ApiClient:
    forwarded = {h: request.headers[h] for h in FORWARDED_HEADERS if h in request.headers}
    return ApiClient(
        base_url=settings.upstream_api_url,
        timeout=settings.upstream_timeout_seconds,
        headers=forwarded,
    )
