"""
Exporter configuration.

Pydantic-based settings read from STICKTABLE_EXPORTER_* environment
variables and an optional .env file.
"""

from sticktable_exporter.config.settings import Settings, get_settings, load_settings

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
]
