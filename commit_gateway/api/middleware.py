"""HTTP middleware wrapped around every route."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..core.access import API_KEY_HEADER
from ..core.errors import NotFoundError
from .errors import catch_server_errors
from .negotiation import negotiate


async def reject_trailing_slash(request: Request, call_next):
    path = request.url.path
    if path != "/" and path.endswith("/"):
        return negotiate(request, NotFoundError.status_code, NotFoundError.default_message)
    return await call_next(request)


def install_middleware(app: FastAPI) -> None:
    """Install middleware; the last one added runs first, so CORS is outermost."""
    app.middleware("http")(reject_trailing_slash)
    app.middleware("http")(catch_server_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", API_KEY_HEADER],
    )
