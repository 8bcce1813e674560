"""Run the commit gateway under uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from .main import app, configure_logging

logger = logging.getLogger("commit-gateway")


def main() -> None:
    config = app.state.config
    configure_logging(config.log_level)
    logger.info("Server starting on port=%s env=%s", config.port, config.env)
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_graceful_shutdown=config.shutdown_grace_seconds,
    )
    logger.info("Server stopped")


if __name__ == "__main__":
    main()
