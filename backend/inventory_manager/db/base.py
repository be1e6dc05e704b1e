"""Declarative base and async engine factory for the relational backend."""

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from inventory_manager.core.config import Settings


class Base(DeclarativeBase):
    pass


def _pool_options(url: URL, settings: Settings) -> dict:
    # SQLite pools (static / single-file) reject sizing arguments.
    if url.get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide connection pool. Owned by the caller."""
    url = make_url(settings.database_url)
    return create_async_engine(url, echo=settings.DEBUG, **_pool_options(url, settings))
