import logging
import uuid
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

log = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: list | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or []


class UpstreamError(AppError):
    """The upstream expense API could not be read."""

    def __init__(self, message: str, upstream_status: int | None = None, path: str | None = None):
        details = []
        if path:
            details.append({"field": "path", "issue": path})
        if upstream_status is not None:
            details.append({"field": "upstreamStatus", "issue": str(upstream_status)})
        super().__init__("UPSTREAM_ERROR", message, status_code=502, details=details)
        self.upstream_status = upstream_status
        self.path = path


def get_request_id(request: Request) -> str:
    rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    return rid if rid else str(uuid.uuid4())


def error_response(request: Request, status_code: int, code: str, message: str, details: list) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details,
                "requestId": get_request_id(request),
            }
        },
    )


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log.warning("%s on %s: %s %s", exc.code, request.url.path, exc.message, exc.details)
    return error_response(request, exc.status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # only query params and headers are validated here; loc is ("query", "month") etc.
    details = [
        {"field": str(e["loc"][-1]) if e.get("loc") else "query", "issue": e.get("msg", "Invalid")}
        for e in exc.errors()
    ]
    return error_response(request, 400, "VALIDATION_ERROR", "Validation failed", details)


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s", request.url.path)
    return error_response(request, 500, "INTERNAL_ERROR", "Dashboard could not be built", [])
