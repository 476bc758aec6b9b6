import logging
from typing import Any

import structlog

# Names accepted by both stdlib logging and uvicorn's --log-level.
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def normalize_log_level(level: str) -> str:
    """
    Return the canonical upper-case name of a log level.

    ``WARN`` and ``FATAL`` are folded into ``WARNING`` and ``CRITICAL``;
    anything outside LOG_LEVELS raises ValueError.
    """
    name = level.strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    if name not in LOG_LEVELS:
        raise ValueError(f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
    return name


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog/standard logging bridge, logging to stderr."""

    if isinstance(level, str):
        level = normalize_log_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdout is reserved for exposition output in --once mode
    logging.basicConfig(level=level, format="%(message)s")


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Bind contextual fields for downstream logs."""

    logger = structlog.get_logger()
    return logger.bind(**kwargs)
