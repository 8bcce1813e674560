"""Entry point wiring the FastAPI application for the commit gateway."""

from __future__ import annotations

import logging
from functools import partial

import httpx
from fastapi import FastAPI

from .api import routes
from .api.errors import register_exception_handlers
from .api.middleware import install_middleware
from .config import ServiceConfig, load_config
from .core.access import AccessGuard
from .core.providers import select_provider


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper())


def build_app(config: ServiceConfig | None = None, http_client: httpx.Client | None = None) -> FastAPI:
    """Create and configure the FastAPI instance."""
    config = config or load_config()
    app = FastAPI(title="Commit Gateway", version="0.1.0")

    http_client = http_client or httpx.Client(timeout=config.upstream_timeout_seconds)
    access_guard = AccessGuard(config.allowed_ips)
    provider_factory = partial(select_provider, config=config.providers, http_client=http_client)

    app.state.config = config
    app.state.http_client = http_client
    app.include_router(routes.router)
    app.dependency_overrides[routes.get_provider_factory] = lambda: provider_factory
    app.dependency_overrides[routes.get_access_guard] = lambda: access_guard
    register_exception_handlers(app)
    install_middleware(app)

    @app.on_event("shutdown")
    def _shutdown() -> None:
        http_client.close()

    return app


app = build_app()
