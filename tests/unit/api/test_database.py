"""
Unit tests for request session plumbing.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from sqlalchemy import text

from resourceplanner.api import database
from resourceplanner.storage.postgres_adapter import PostgresConfig


@pytest.fixture
def sqlite_adapter():
    database._postgres_adapter = None
    adapter = database.get_postgres_adapter(PostgresConfig(DATABASE_URL="sqlite://"))
    adapter.connect()
    adapter.create_schema()
    yield adapter
    database.close_postgres_adapter()


def test_adapter_is_created_once():
    database._postgres_adapter = None
    try:
        first = database.get_postgres_adapter(PostgresConfig(DATABASE_URL="sqlite://"))
        assert database.get_postgres_adapter() is first
        assert first.config.is_sqlite
    finally:
        database._postgres_adapter = None


def test_get_db_commits_on_success(sqlite_adapter):
    dependency = database.get_db()
    session = next(dependency)
    session.execute(text("INSERT INTO projects (name, status, priority) VALUES ('Apollo', 'active', 'medium')"))
    with pytest.raises(StopIteration):
        next(dependency)

    with sqlite_adapter.get_session() as check:
        assert check.execute(text("SELECT count(*) FROM projects")).scalar() == 1


def test_get_db_rolls_back_and_reraises(sqlite_adapter):
    dependency = database.get_db()
    session = next(dependency)
    session.execute(text("INSERT INTO projects (name, status, priority) VALUES ('Apollo', 'active', 'medium')"))

    with patch.object(database, "logger") as logger:
        with pytest.raises(RuntimeError):
            dependency.throw(RuntimeError("boom"))
    logger.error.assert_called_once()

    with sqlite_adapter.get_session() as check:
        assert check.execute(text("SELECT count(*) FROM projects")).scalar() == 0


def test_client_errors_are_not_logged_as_failures(sqlite_adapter):
    dependency = database.get_db()
    next(dependency)

    with patch.object(database, "logger") as logger:
        with pytest.raises(HTTPException):
            dependency.throw(HTTPException(status_code=404, detail="Not found"))
    logger.error.assert_not_called()


def test_close_is_idempotent():
    adapter = MagicMock()
    database._postgres_adapter = adapter
    database.close_postgres_adapter()
    database.close_postgres_adapter()
    adapter.close.assert_called_once()
    assert database._postgres_adapter is None
