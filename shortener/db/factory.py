"""
Store Factory

Builds the URLStore for a configured database URL:
- memory:// -> MemoryURLStore
- anything else -> SQLURLStore on an engine from the dialect's adapter
"""

import logging

from shortener.db.interface import URLStore
from shortener.db.memory import MemoryURLStore
from shortener.db.session import create_engine, create_session_maker, init_models
from shortener.db.sql_store import SQLURLStore

logger = logging.getLogger(__name__)

MEMORY_URL = "memory://"


async def create_store(database_url: str, strict_dedup: bool = False) -> URLStore:
    """
    Create and initialise the store for database_url.

    Args:
        database_url: SQLAlchemy async URL, or memory://
        strict_dedup: Enforce one row per URL at the storage level

    Returns:
        Ready-to-use URLStore
    """
    if database_url.startswith(MEMORY_URL):
        logger.info("Using in-memory URL store")
        return MemoryURLStore(unique_urls=strict_dedup)

    engine = create_engine(database_url)
    await init_models(engine, strict_dedup=strict_dedup)
    logger.info(f"Using SQL URL store ({engine.dialect.name}, strict_dedup={strict_dedup})")
    return SQLURLStore(create_session_maker(engine), engine=engine)
