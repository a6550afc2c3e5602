"""
Per-request logging and correlation.

Every request gets a ``request_id`` (the caller's ``X-Request-ID`` when
sent, otherwise a short random id) bound into structlog contextvars, so the
export pipeline's events and the image fetcher's warnings carry it too.
Responses echo it back together with ``X-Response-Time``.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger("channelkit.api")

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"
UNLOGGED_PATHS = frozenset({"/health"})


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        if request.url.path not in UNLOGGED_PATHS:
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=elapsed_ms,
                client=request.client.host if request.client else None,
            )

        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms}ms"
        response.headers[REQUEST_ID_HEADER] = request_id
        structlog.contextvars.clear_contextvars()
        return response
