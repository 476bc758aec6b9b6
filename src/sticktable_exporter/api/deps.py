from __future__ import annotations

from fastapi import Depends, Request

from sticktable_exporter.clients import ControlSocketClient
from sticktable_exporter.config import Settings
from sticktable_exporter.haproxy import TableScraper
from sticktable_exporter.metrics import RenderConfig


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_scraper(settings: Settings = Depends(get_app_settings)) -> TableScraper:  # noqa: B008
    client = ControlSocketClient(settings.socket_path, timeout=settings.socket_timeout)
    return TableScraper(client)


def get_render_config(settings: Settings = Depends(get_app_settings)) -> RenderConfig:  # noqa: B008
    return settings.render_config()
