from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from sticktable_exporter import __version__
from sticktable_exporter.api.routes import health, metrics
from sticktable_exporter.config import Settings, get_settings
from sticktable_exporter.logging import configure_logging

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the exporter application.

    The metrics route path comes from ``settings.endpoint``, so it is
    fixed for the lifetime of the app.
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        logger.info(
            "exporter_started",
            socket=settings.socket_path,
            endpoint=settings.endpoint,
            instance=settings.instance or None,
        )
        yield

    app = FastAPI(
        title="HAProxy Stick Table Exporter",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(metrics.build_router(settings.endpoint), tags=["metrics"])
    app.include_router(health.router, tags=["health"])
    return app
