"""Error Handlers — global exception handlers for the healthd ASGI app.

Invariants:
    - HealthdError → its own plain-text reply, logged at the level of its severity
    - Starlette 404 and 405 → RouteNotFoundError reply (one 404 for every miss)
    - Any other HTTPException → plain text of its status and detail
    - Exception (catch-all) → plain-text 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (HealthdError), routing (HTTPException), catch-all (Exception)
    - HealthdError is raised by the health route when the raw target misses
      (e.g. /%68ealth, which Starlette matched after percent-decoding)
    - The non-miss HTTPException branch and the catch-all are not reached by
      GET /health itself; they keep every framework error plain text
    - 405 collapsed into 404: the listener distinguishes only hit vs. miss
    - Extracted from main.py to keep the app factory small
"""

import logging

from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthd.api.responses import to_plain_response
from healthd.core.errors import ErrorSeverity, HealthdError, RouteNotFoundError
from healthd.core.reply import PlainTextReply, INTERNAL_ERROR

logger = logging.getLogger(__name__)

_MISS_STATUSES = (
    status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
)

_SEVERITY_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_healthd_error_handler(app)
    _register_http_exception_handler(app)
    _register_generic_error_handler(app)


def _register_healthd_error_handler(app: FastAPI) -> None:

    @app.exception_handler(HealthdError)
    async def healthd_error_handler(request: Request, exc: HealthdError):
        """Handle all healthd domain errors."""
        _log_healthd_error(request, exc)
        return to_plain_response(exc.to_reply())


def _register_http_exception_handler(app: FastAPI) -> None:
    """Register the router-miss handler (unknown path or method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        if exc.status_code in _MISS_STATUSES:
            miss = RouteNotFoundError(request.method, request.url.path)
            _log_healthd_error(request, miss)
            return to_plain_response(miss.to_reply())
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}",
            extra={"status": exc.status_code, "path": request.url.path},
        )
        return to_plain_response(
            PlainTextReply(status=exc.status_code, body=f"{exc.detail}\n"),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return to_plain_response(INTERNAL_ERROR)


def _log_healthd_error(request: Request, exc: HealthdError) -> None:
    logger.log(
        _SEVERITY_LEVELS[exc.severity], exc.message,
        extra={
            "error_code": exc.code,
            "method": request.method,
            "path": request.url.path,
        },
    )
