"""
Persistence Abstraction

This module defines the two seams between the shortener and its storage:

- URLStore: the persistence port the shortening and resolution services
  depend on. Exactly three operations; any backend (SQL, in-memory, a test
  double) can stand behind it.
- DatabaseAdapter: per-dialect SQLAlchemy engine configuration used by the
  SQL-backed store, so SQLite, MySQL and PostgreSQL differ only in their
  adapter class.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool


class URLStore(ABC):
    """
    Persistence port for shortened URLs.

    Implementations report failures with the shortener's exception types:
    - StorageError for any backend failure
    - DuplicateUrlError (a StorageError) when the backend enforces one row
      per URL and the URL already has one
    - NotFoundError when find_url_by_id has no row
    """

    @abstractmethod
    async def insert(self, long_url: str) -> int:
        """
        Store long_url and return its freshly assigned identifier.

        Raises:
            StorageError: On backend failure
            DuplicateUrlError: If the backend enforces unique URLs
        """

    @abstractmethod
    async def find_url_by_id(self, identifier: int) -> str:
        """
        Return the long URL stored under identifier.

        Raises:
            NotFoundError: If no row exists
            StorageError: On backend failure
        """

    @abstractmethod
    async def find_id_by_url(self, long_url: str) -> Optional[int]:
        """
        Return the identifier of a row holding exactly long_url, or None.

        Raises:
            StorageError: On backend failure
        """

    async def close(self) -> None:
        """Release backend resources. No-op by default."""


class DatabaseAdapter(ABC):
    """
    Abstract base class for SQL database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Register it in get_database_adapter()
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine options (override adapter defaults)

        Returns:
            Configured AsyncEngine instance
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs.setdefault("poolclass", pool_class)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class, or None to use SQLAlchemy's default
        """

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get DBAPI connection arguments specific to this database type."""

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'mysql')
        """
