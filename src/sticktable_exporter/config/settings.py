"""
Application settings using Pydantic.

Provides environment-based configuration loading with STICKTABLE_EXPORTER_ prefix.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from sticktable_exporter.core.errors import ConfigurationError
from sticktable_exporter.logging import normalize_log_level
from sticktable_exporter.metrics.renderer import RenderConfig


class Settings(BaseSettings):
    """Application settings."""

    # HAProxy control socket
    socket_path: str = "/run/haproxy/admin.sock"
    socket_timeout: float | None = Field(default=None, gt=0)

    # Rendering
    gpc: str = "gpc0"
    req_rate: str = "http_req_rate(10000)"
    instance: str = ""

    # HTTP
    endpoint: str = Field(default="/metrics", pattern=r"^/")
    host: str = "0.0.0.0"
    port: int = Field(default=9322, ge=1, le=65535)

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "STICKTABLE_EXPORTER_"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        return normalize_log_level(value)

    def render_config(self) -> RenderConfig:
        return RenderConfig(
            blocking_field=self.gpc,
            request_rate_field=self.req_rate,
            instance=self.instance,
        )


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment, applying explicit overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(
            "invalid configuration",
            details={"errors": "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
            )},
        ) from exc


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
