"""Structured logging configuration."""
import logging
from typing import Any, List

import structlog

_LEVELS = {
    "development": logging.DEBUG,
    "test": logging.WARNING,
}


def _renderer(environment: str) -> Any:
    if environment == "development":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(environment: str = "development", level: str = "") -> None:
    """Configure structlog for the records service.

    Args:
        environment: Environment name (development, test, production)
        level: Explicit level name; overrides the environment default
    """
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        _renderer(environment),
    ]
    threshold = logging.getLevelName(level.upper()) if level else _LEVELS.get(environment, logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Logger carrying the module name as ``logger_name`` on every event."""
    return structlog.get_logger(logger_name=name)
