"""
SQL Database Adapters

Implementations of DatabaseAdapter for the supported SQL backends.

SQLite (default, sqlite+aiosqlite://):
- File-based, no server required
- Single writer at a time (file locking)
- Good for local development, tests and single-instance deployments

MySQL (mysql+aiomysql://) and PostgreSQL (postgresql+asyncpg://):
- Server-based, pooled connections
- Drivers ship as optional extras: pip install shortener[mysql] / [postgres]
"""

from typing import Any, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool, Pool

from shortener.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Uses NullPool: each session opens the database file on demand, so there
    is no connection state to share between coroutines.
    """

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"


class ServerDatabaseAdapter(DatabaseAdapter):
    """
    Adapter for client/server databases (MySQL, PostgreSQL).

    Connections come from SQLAlchemy's default async queue pool. Stale
    connections are detected with a ping before use, and recycled before the
    server's idle timeout closes them.
    """

    def __init__(self, dialect_name: str, pool_size: int = 5, max_overflow: int = 10):
        self.dialect_name = dialect_name
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
        }

    def get_dialect_name(self) -> str:
        return self.dialect_name


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Args:
        database_url: SQLAlchemy URL (async driver)

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the dialect is not supported
    """
    dialect = make_url(database_url).get_backend_name()

    if dialect == "sqlite":
        return SQLiteAdapter()
    if dialect in ("mysql", "postgresql"):
        return ServerDatabaseAdapter(dialect)

    raise ValueError(f"Unsupported database dialect: {dialect!r}")
