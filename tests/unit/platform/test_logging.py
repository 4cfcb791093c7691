"""
Unit tests for structured logging helpers.
"""

import structlog

from resourceplanner.platform.config import settings
from resourceplanner.platform.logging import (
    add_service_info,
    bind_request_context,
    clear_request_context,
)


def test_service_info_is_added():
    event = add_service_info(None, "info", {"event": "hello"})
    assert event["service"] == settings.APP_NAME
    assert event["version"] == settings.VERSION
    assert event["env"] == settings.APP_ENV


def test_service_info_keeps_explicit_values():
    event = add_service_info(None, "info", {"event": "hello", "service": "worker"})
    assert event["service"] == "worker"


def test_request_context_binding():
    bind_request_context("abc", path="/api/v1/resources/")
    try:
        context = structlog.contextvars.get_contextvars()
        assert context == {"correlation_id": "abc", "path": "/api/v1/resources/"}

        bind_request_context("def")
        assert structlog.contextvars.get_contextvars() == {"correlation_id": "def"}
    finally:
        clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}
