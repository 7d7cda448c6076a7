"""
Database Engine and Session Management

This module builds the async SQLAlchemy engine and session factory for a
database URL, and creates the schema.

Key Features:
- Database abstraction: the adapter for the URL's dialect configures the engine
- Async session management: one short-lived session per store operation
- Schema creation: idempotent, plus the optional strict dedup unique index

Production deployments manage the schema with Alembic (see migrations/);
init_models() exists so tests and local runs work against an empty database.
"""

import logging

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortener.db.adapters import get_database_adapter
from shortener.db.models import STRICT_DEDUP_INDEX, ShortenedUrl

logger = logging.getLogger(__name__)


def create_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine configured by the adapter for the URL's dialect."""
    adapter = get_database_adapter(database_url)
    return adapter.create_engine(database_url, **kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create the async session factory used by the SQL store.

    Sessions keep loaded objects usable after commit and never autoflush.
    """
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _create_strict_dedup_index(sync_connection) -> None:
    existing = {index["name"] for index in inspect(sync_connection).get_indexes(ShortenedUrl.__tablename__)}
    if STRICT_DEDUP_INDEX.name in existing:
        return
    STRICT_DEDUP_INDEX.create(sync_connection)
    logger.info(f"Created unique index {STRICT_DEDUP_INDEX.name}")


async def init_models(engine: AsyncEngine, strict_dedup: bool = False) -> None:
    """
    Create the shortened_urls table if it does not exist.

    Args:
        engine: Engine to create the schema on
        strict_dedup: Also create the unique index on long_url_hash. This
            fails if the table already holds duplicate URLs.
    """
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
        if strict_dedup:
            await connection.run_sync(_create_strict_dedup_index)
