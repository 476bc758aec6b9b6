"""Core modules for the exporter - centralized definitions and utilities."""

from sticktable_exporter.core.errors import (
    ConfigurationError,
    ControlSocketConnectionError,
    ExitCode,
    ExporterError,
    ProviderError,
    ScrapeError,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "ExporterError",
    "ConfigurationError",
    "ProviderError",
    "ControlSocketConnectionError",
    "ScrapeError",
    "main_with_error_handling",
]
