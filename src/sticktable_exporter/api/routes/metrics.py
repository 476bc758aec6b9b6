from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from sticktable_exporter.api.deps import get_render_config, get_scraper
from sticktable_exporter.core.errors import ExporterError
from sticktable_exporter.haproxy import TableScraper
from sticktable_exporter.metrics import RenderConfig, render_metrics

logger = structlog.get_logger()

EXPOSITION_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


async def metrics(
    scraper: TableScraper = Depends(get_scraper),  # noqa: B008
    config: RenderConfig = Depends(get_render_config),  # noqa: B008
) -> PlainTextResponse:
    """Scrape HAProxy stick tables and return them as exposition text."""
    try:
        body = await render_metrics(scraper, config)
    except ExporterError as exc:
        cause = exc.__cause__
        logger.error(
            "scrape_failed",
            error_type=type(exc).__name__,
            message=exc.message,
            cause=str(cause) if cause else None,
            **exc.details,
        )
        return PlainTextResponse(
            "Internal Server Error\n",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return PlainTextResponse(body, media_type=EXPOSITION_CONTENT_TYPE)


def build_router(path: str) -> APIRouter:
    router = APIRouter()
    router.add_api_route(
        path,
        metrics,
        methods=["GET"],
        response_class=PlainTextResponse,
        status_code=status.HTTP_200_OK,
    )
    return router
