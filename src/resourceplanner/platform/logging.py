"""
Resource Planner Structured Logging

structlog setup shared by the API and the engine. Every event carries the
service identity (name, version, environment); events logged while a request
is being served also carry its correlation id, method and path, bound through
structlog's contextvars by the API middleware.
"""

import logging
import sys
from typing import Any

import structlog

from resourceplanner.platform.config import settings


def add_service_info(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Stamp service identity on every event unless a caller set it already."""
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("version", settings.VERSION)
    event_dict.setdefault("env", settings.APP_ENV)
    return event_dict


def configure_logging() -> None:
    """Configure structured logging for the application."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.APP_ENV == "production"
        else structlog.dev.ConsoleRenderer(colors=settings.DEBUG)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_info,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def bind_request_context(correlation_id: str, **values: Any) -> None:
    """Attach request fields to every event logged until the context is cleared."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id, **values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
