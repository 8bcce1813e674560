"""Exception handlers mapping every failure onto a negotiated response."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import NotFoundError, ServiceError
from .negotiation import negotiate

logger = logging.getLogger("commit-gateway.errors")

SERVER_ERROR_MESSAGE = "The server encountered a problem and could not process your request"


def report_server_error(request: Request, exc: BaseException) -> None:
    """Log a server fault with the request context and stack trace."""
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        "%s",
        exc,
        extra={
            "request": {"method": request.method, "url": str(request.url)},
            "trace": trace,
        },
    )


async def _service_error_handler(request: Request, exc: ServiceError):
    return negotiate(request, exc.status_code, exc.message)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return negotiate(request, exc.status_code, NotFoundError.default_message, exc.headers)
    return negotiate(request, exc.status_code, str(exc.detail), exc.headers)


async def catch_server_errors(request: Request, call_next):
    """Turn anything the exception handlers did not claim into a generic 500."""
    try:
        return await call_next(request)
    except Exception as exc:  # noqa: BLE001
        report_server_error(request, exc)
        return negotiate(request, status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
