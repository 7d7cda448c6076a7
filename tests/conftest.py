"""Pytest configuration and fixtures."""

import httpx
import pytest
import pytest_asyncio

from shortener.core.setting import Settings
from shortener.db.factory import create_store
from shortener.db.memory import MemoryURLStore
from shortener.main import create_app


@pytest.fixture
def memory_store() -> MemoryURLStore:
    return MemoryURLStore()


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SQLite-backed store on a fresh database file."""
    store = await create_store(f"sqlite+aiosqlite:///{tmp_path / 'shortener.db'}")
    yield store
    await store.close()


@pytest_asyncio.fixture
async def strict_sql_store(tmp_path):
    """SQLite-backed store with the unique URL index."""
    store = await create_store(
        f"sqlite+aiosqlite:///{tmp_path / 'shortener-strict.db'}",
        strict_dedup=True,
    )
    yield store
    await store.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, DATABASE_URL="memory://", BASE_URL=None, STRICT_DEDUP=False)


@pytest.fixture
def app(settings, memory_store):
    return create_app(settings, store=memory_store)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
