"""Console entry point serving the shopping-list API with uvicorn."""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from cesta.config import Settings, get_settings

APP_FACTORY = "cesta.server.app:create_app"

logger = logging.getLogger(__name__)


def build_config(settings: Settings) -> uvicorn.Config:
    """uvicorn config for the app factory; logging stays with ``create_app``."""

    return uvicorn.Config(
        APP_FACTORY,
        factory=True,
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.server_reload,
        log_config=None,
    )


async def _serve_for(server: uvicorn.Server, seconds: float) -> None:
    async def _stop_later() -> None:
        await asyncio.sleep(seconds)
        logger.info("Stopping shopping API after %ss", seconds)
        server.should_exit = True

    stopper = asyncio.create_task(_stop_later())
    try:
        await server.serve()
    finally:
        stopper.cancel()


def main() -> None:
    """Serve the API on the host and port from ``CESTA_SERVER_*`` settings."""

    settings = get_settings()
    if settings.server_reload and settings.server_duration is not None:
        raise SystemExit("CESTA_SERVER_RELOAD cannot be combined with CESTA_SERVER_DURATION.")

    if settings.server_reload:
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=settings.server_host,
            port=settings.server_port,
            reload=True,
            log_config=None,
        )
        return

    server = uvicorn.Server(build_config(settings))
    if settings.server_duration is not None:
        asyncio.run(_serve_for(server, settings.server_duration))
        return
    server.run()


if __name__ == "__main__":
    main()
