import logging
import sys
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

log = logging.getLogger("app.request")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("app")
    root.setLevel(level.upper())
    if not any(getattr(h, "_app_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._app_handler = True
        root.addHandler(handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.time()
        response = await call_next(request)
        ms = int((time.time() - start) * 1000)

        response.headers["x-request-id"] = request_id
        response.headers["x-response-time-ms"] = str(ms)
        log.info("%s %s %s %dms rid=%s", request.method, request.url.path, response.status_code, ms, request_id)
        return response
