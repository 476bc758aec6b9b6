"""Root test configuration."""

import logging
import os

import pytest
import structlog
from sticktable_exporter.config import get_settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep exporter settings from the host environment out of tests."""
    for name in list(os.environ):
        if name.startswith("STICKTABLE_EXPORTER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(os.path.dirname(__file__))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
