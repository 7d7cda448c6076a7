"""
SQL URL Store

URLStore implementation on SQLModel/SQLAlchemy async sessions. Works with
any dialect that has a DatabaseAdapter (SQLite, MySQL, PostgreSQL).

Error mapping:
- IntegrityError on insert -> DuplicateUrlError (unique index in strict mode)
- any other SQLAlchemyError -> StorageError, original exception preserved
- missing row in find_url_by_id -> NotFoundError
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from shortener.core.exceptions import DuplicateUrlError, NotFoundError, StorageError
from shortener.db.interface import URLStore
from shortener.db.models import ShortenedUrl, hash_url

logger = logging.getLogger(__name__)

# Identifiers are stored in a signed 64-bit column
MAX_IDENTIFIER = 2 ** 63 - 1


class SQLURLStore(URLStore):
    """
    SQL-backed persistence port.

    Each operation runs in its own session and transaction, so the store can
    be shared by any number of concurrent requests.
    """

    def __init__(self, session_maker: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        """
        Args:
            session_maker: Factory producing async sessions
            engine: Engine to dispose on close(), if the store owns it
        """
        self.session_maker = session_maker
        self.engine = engine

    async def insert(self, long_url: str) -> int:
        """
        Insert a row for long_url in its own transaction.

        Args:
            long_url: URL to store verbatim; its SHA-256 hash is stored alongside

        Returns:
            The identifier assigned by the database

        Raises:
            DuplicateUrlError: If the strict dedup unique index rejects the row
            StorageError: On any other database failure
        """
        row = ShortenedUrl(long_url=long_url, long_url_hash=hash_url(long_url))
        try:
            async with self.session_maker() as session:
                session.add(row)
                await session.commit()
                return row.id
        except IntegrityError as e:
            raise DuplicateUrlError(long_url, original_error=e) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert URL: {e}")
            raise StorageError(f"Failed to insert URL: {e}", original_error=e) from e

    async def find_url_by_id(self, identifier: int) -> str:
        """
        Return the URL stored under identifier.

        Identifiers outside 1..MAX_IDENTIFIER are answered without a query.

        Raises:
            NotFoundError: If no row has that identifier
            StorageError: On database failure
        """
        if identifier < 1 or identifier > MAX_IDENTIFIER:
            raise NotFoundError(identifier)

        try:
            async with self.session_maker() as session:
                statement = select(ShortenedUrl.long_url).where(ShortenedUrl.id == identifier)
                result = await session.execute(statement)
                long_url = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up identifier {identifier}: {e}")
            raise StorageError(f"Failed to look up identifier {identifier}: {e}", original_error=e) from e

        if long_url is None:
            raise NotFoundError(identifier)
        return long_url

    async def find_id_by_url(self, long_url: str) -> Optional[int]:
        """
        Return the oldest identifier holding exactly long_url, or None.

        The indexed hash narrows the scan; the long_url comparison rules out
        hash collisions.

        Raises:
            StorageError: On database failure
        """
        try:
            async with self.session_maker() as session:
                statement = (
                    select(ShortenedUrl.id)
                    .where(ShortenedUrl.long_url_hash == hash_url(long_url))
                    .where(ShortenedUrl.long_url == long_url)
                    .order_by(ShortenedUrl.id)
                    .limit(1)
                )
                result = await session.execute(statement)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up URL: {e}")
            raise StorageError(f"Failed to look up URL: {e}", original_error=e) from e

    async def close(self) -> None:
        """Dispose the engine if this store owns one."""
        if self.engine is not None:
            await self.engine.dispose()
