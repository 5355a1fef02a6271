"""Structured logging utilities."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog to render JSON through the stdlib root logger (stderr)."""

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=numeric_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)


def log_config(logger: structlog.stdlib.BoundLogger, config: Dict[str, Any]) -> None:
    """Log a configuration snapshot."""

    logger.info("config", **config)
