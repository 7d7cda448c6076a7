"""Tests for token resolution."""

import pytest

from shortener.core.codec import encode
from shortener.core.exceptions import InvalidCharacterError, MalformedTokenError, NotFoundError, StorageError
from shortener.db.memory import MemoryURLStore
from shortener.services.redirect_service import RedirectService


class BrokenStore(MemoryURLStore):

    def __init__(self, error):
        super().__init__()
        self.error = error

    async def find_url_by_id(self, identifier):
        self.calls["find_url_by_id"] += 1
        raise self.error


@pytest.mark.asyncio
async def test_resolves_stored_url(memory_store):
    identifier = await memory_store.insert("https://example.com/a?b=c")
    service = RedirectService(memory_store)

    assert await service.resolve(encode(identifier)) == "https://example.com/a?b=c"


@pytest.mark.asyncio
async def test_returns_url_unchanged(memory_store):
    for i in range(10):
        await memory_store.insert(f"http://example.com/{i}")
    await memory_store.insert("HTTP://Example.com/../x")
    service = RedirectService(memory_store)

    # identifier 11 encodes to "f"
    assert await service.resolve("f") == "HTTP://Example.com/../x"


@pytest.mark.asyncio
async def test_unknown_token_is_not_found(memory_store):
    service = RedirectService(memory_store)

    with pytest.raises(NotFoundError) as exc_info:
        await service.resolve(encode(999999))

    assert exc_info.value.identifier == 999999
    assert memory_store.calls["find_url_by_id"] == 1


@pytest.mark.asyncio
async def test_zero_token_is_not_found(memory_store):
    await memory_store.insert("http://example.com")
    service = RedirectService(memory_store)

    with pytest.raises(NotFoundError):
        await service.resolve(encode(0))


@pytest.mark.asyncio
async def test_malformed_token_skips_storage(memory_store):
    service = RedirectService(memory_store)

    with pytest.raises(MalformedTokenError) as exc_info:
        await service.resolve("!!!")

    assert exc_info.value.token == "!!!"
    assert isinstance(exc_info.value.__cause__, InvalidCharacterError)
    assert sum(memory_store.calls.values()) == 0


@pytest.mark.asyncio
async def test_storage_errors_propagate():
    store = BrokenStore(StorageError("database is locked"))
    service = RedirectService(store)

    with pytest.raises(StorageError):
        await service.resolve("f")

    assert store.calls["find_url_by_id"] == 1


@pytest.mark.asyncio
async def test_foreign_errors_are_wrapped():
    service = RedirectService(BrokenStore(TimeoutError("read timed out")))

    with pytest.raises(StorageError) as exc_info:
        await service.resolve("f")

    assert isinstance(exc_info.value.original_error, TimeoutError)


@pytest.mark.asyncio
async def test_overlong_token_is_not_found_without_lookup(memory_store):
    service = RedirectService(memory_store, max_token_length=4)

    with pytest.raises(NotFoundError) as exc_info:
        await service.resolve("bbbbb")

    assert exc_info.value.token == "bbbbb"
    assert exc_info.value.identifier is None
    assert sum(memory_store.calls.values()) == 0


@pytest.mark.asyncio
async def test_overlong_token_with_foreign_character_is_malformed(memory_store):
    service = RedirectService(memory_store, max_token_length=4)

    with pytest.raises(MalformedTokenError) as exc_info:
        await service.resolve("bbbbb!")

    assert exc_info.value.__cause__.position == 5
    assert sum(memory_store.calls.values()) == 0
