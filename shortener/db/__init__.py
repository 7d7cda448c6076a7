"""
Persistence layer.

This module provides:
- URLStore: the persistence port the services depend on
- DatabaseAdapter: per-dialect engine configuration for SQL backends
- MemoryURLStore / SQLURLStore: the two store implementations
- create_store(): picks and initialises a store for a database URL

To add a new SQL backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Register it in get_database_adapter() in adapters.py
"""

from shortener.db.factory import create_store
from shortener.db.interface import DatabaseAdapter, URLStore
from shortener.db.memory import MemoryURLStore
from shortener.db.sql_store import SQLURLStore

__all__ = [
    "DatabaseAdapter",
    "URLStore",
    "MemoryURLStore",
    "SQLURLStore",
    "create_store",
]
