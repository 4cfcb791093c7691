"""
Database session plumbing for request handlers.

One PostgresAdapter per process. `get_db` gives each request its own session
whose transaction commits when the handler returns and rolls back when it
raises. Writers that must publish their rows before the response (cache
invalidation) commit early through `CapacityService.invalidate(session)`.
"""

from typing import Generator, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.postgres_adapter import PostgresAdapter, PostgresConfig

logger = get_logger(__name__)

_postgres_adapter: PostgresAdapter | None = None


def get_postgres_adapter(config: Optional[PostgresConfig] = None) -> PostgresAdapter:
    """Process-wide adapter; `config` only applies on first creation."""
    global _postgres_adapter
    if _postgres_adapter is None:
        config = config or PostgresConfig()
        _postgres_adapter = PostgresAdapter(config)
        logger.info("Database adapter created", sqlite=config.is_sqlite)
    return _postgres_adapter


def get_db() -> Generator[Session, None, None]:
    adapter = get_postgres_adapter()
    try:
        with adapter.get_session() as session:
            yield session
    except HTTPException:
        # Client errors roll the transaction back without being storage failures
        raise
    except Exception as e:
        logger.error("Request transaction rolled back", error=str(e))
        raise


def close_postgres_adapter() -> None:
    global _postgres_adapter
    if _postgres_adapter is not None:
        _postgres_adapter.close()
        _postgres_adapter = None
        logger.info("Database adapter closed")
