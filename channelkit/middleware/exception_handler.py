"""
Global exception handlers for the FastAPI application.

Catches:
1. ChannelKitError subclasses, mapped to HTTP status codes. The response
   carries the exception's ``details`` (validation result, available
   channels, generation diagnostics) next to ``detail`` and ``error_type``.
2. Unhandled Exception, returned as 500 with a unique ``error_id`` for
   support correlation.

HTTPException and request validation errors are left to FastAPI's
built-in handlers.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from channelkit.core.exceptions import (
    ChannelKitError,
    DownloadError,
    ExportNotImplementedError,
    ExportValidationError,
    GenerationError,
    NotFoundError,
    UnsupportedChannelError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the FastAPI app.

    Called from ``create_app()`` after all middleware and routers
    are registered.
    """

    @app.exception_handler(ChannelKitError)
    async def handle_channelkit_error(request: Request, exc: ChannelKitError) -> JSONResponse:
        """Map ChannelKitError subclasses to HTTP status codes."""
        status_code = _get_status_code(exc)
        if status_code >= 500 and status_code != 501:
            logger.error(
                f"{type(exc).__name__}: {exc.message}",
                exc_info=exc,
                extra={"error_type": type(exc).__name__, "path": request.url.path},
            )
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

        return JSONResponse(
            status_code=status_code,
            content={
                **exc.details,
                "success": False,
                "detail": exc.message,
                "error_type": type(exc).__name__,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: log, return 500 with error_id."""
        error_id = uuid.uuid4().hex[:8]
        logger.exception(
            f"Unhandled exception (error_id={error_id})",
            extra={"error_id": error_id, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )


# First match wins; order subclasses before their bases
_STATUS_BY_TYPE = (
    (NotFoundError, 404),
    (ExportValidationError, 400),
    ((UnsupportedChannelError, ExportNotImplementedError), 501),
    # Package building recovers these; one reaching the API escaped a caller
    (DownloadError, 502),
    (GenerationError, 500),
)


def _get_status_code(exc: ChannelKitError) -> int:
    for exc_types, status_code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_types):
            return status_code
    return 500
