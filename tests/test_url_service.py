"""Tests for the URL shortening service."""

import asyncio

import pytest

from shortener.core.codec import decode, encode
from shortener.core.exceptions import DuplicateUrlError, InvalidUrlFormatError, StorageError
from shortener.db.memory import MemoryURLStore
from shortener.services.locks import KeyedLock
from shortener.services.url_service import URLShorteningService, build_short_link

BASE = "http://sho.rt"


class FailingStore(MemoryURLStore):
    """Store whose lookups blow up with a non-storage exception."""

    async def find_id_by_url(self, long_url):
        self.calls["find_id_by_url"] += 1
        raise ConnectionResetError("connection lost")


class LateWriterStore(MemoryURLStore):
    """Simulates another process inserting the URL right after our first lookup."""

    def __init__(self):
        super().__init__(unique_urls=True)
        self._raced = False

    async def find_id_by_url(self, long_url):
        found = await super().find_id_by_url(long_url)
        if found is None and not self._raced:
            self._raced = True
            self._urls[self._next_id] = long_url
            self._next_id += 1
        return found


class TestBuildShortLink:

    def test_joins_with_single_separator(self):
        assert build_short_link("http://sho.rt", "f") == "http://sho.rt/f"
        assert build_short_link("http://sho.rt/", "f") == "http://sho.rt/f"

    def test_keeps_base_path(self):
        assert build_short_link("https://example.com/s", "32") == "https://example.com/s/32"


class TestShorten:

    @pytest.mark.asyncio
    async def test_new_url_is_inserted_and_encoded(self, memory_store):
        service = URLShorteningService(memory_store)

        link = await service.shorten("http://example.com", BASE)

        assert link == f"{BASE}/{encode(1)}"
        assert memory_store.calls["insert"] == 1
        assert memory_store.rows() == [(1, "http://example.com")]

    @pytest.mark.asyncio
    async def test_shortening_twice_inserts_once(self, memory_store):
        service = URLShorteningService(memory_store)

        first = await service.shorten("http://example.com", BASE)
        second = await service.shorten("http://example.com", BASE)

        assert first == second
        assert memory_store.calls["insert"] == 1
        assert memory_store.calls["find_id_by_url"] == 2

    @pytest.mark.asyncio
    async def test_existing_identifier_is_reused(self, memory_store):
        for i in range(10):
            await memory_store.insert(f"https://example.com/{i}")
        service = URLShorteningService(memory_store)

        link = await service.shorten("https://example.com/7", BASE)

        assert link == f"{BASE}/{encode(8)}"
        assert memory_store.calls["insert"] == 10

    @pytest.mark.asyncio
    async def test_textually_different_urls_get_distinct_tokens(self, memory_store):
        service = URLShorteningService(memory_store)

        plain = await service.shorten_to_token("http://example.com")
        slash = await service.shorten_to_token("http://example.com/")
        upper = await service.shorten_to_token("HTTP://example.com")

        assert len({plain, slash, upper}) == 3
        assert [url for _, url in memory_store.rows()] == [
            "http://example.com",
            "http://example.com/",
            "HTTP://example.com",
        ]

    @pytest.mark.asyncio
    async def test_token_decodes_to_stored_identifier(self, memory_store):
        service = URLShorteningService(memory_store)

        token = await service.shorten_to_token("https://example.com/page")

        identifier = decode(token)
        assert await memory_store.find_url_by_id(identifier) == "https://example.com/page"

    @pytest.mark.asyncio
    async def test_invalid_url_never_touches_storage(self, memory_store):
        service = URLShorteningService(memory_store)

        with pytest.raises(InvalidUrlFormatError):
            await service.shorten("not-a-url", BASE)

        assert sum(memory_store.calls.values()) == 0

    @pytest.mark.asyncio
    async def test_scheme_set_is_configurable(self, memory_store):
        service = URLShorteningService(memory_store, allowed_schemes=["ftp"])

        assert await service.shorten("ftp://files.example.com/x", BASE) == f"{BASE}/3"
        with pytest.raises(InvalidUrlFormatError):
            await service.shorten("http://example.com", BASE)

    @pytest.mark.asyncio
    async def test_foreign_store_errors_become_storage_errors(self):
        service = URLShorteningService(FailingStore())

        with pytest.raises(StorageError) as exc_info:
            await service.shorten("http://example.com", BASE)

        assert isinstance(exc_info.value.original_error, ConnectionResetError)

    @pytest.mark.asyncio
    async def test_storage_errors_are_not_retried(self):
        store = FailingStore()
        service = URLShorteningService(store)

        with pytest.raises(StorageError):
            await service.shorten("http://example.com", BASE)

        assert store.calls["find_id_by_url"] == 1
        assert store.calls["insert"] == 0


class TestConcurrentShortening:

    @pytest.mark.asyncio
    async def test_best_effort_mode_can_duplicate_rows(self, memory_store):
        service = URLShorteningService(memory_store)

        links = await asyncio.gather(
            service.shorten("http://example.com", BASE),
            service.shorten("http://example.com", BASE),
        )

        assert memory_store.calls["insert"] == 2
        assert len(set(links)) == 2
        assert [url for _, url in memory_store.rows()] == ["http://example.com"] * 2

    @pytest.mark.asyncio
    async def test_strict_mode_serializes_same_url(self, memory_store):
        service = URLShorteningService(memory_store, strict_dedup=True)

        links = await asyncio.gather(*[
            service.shorten("http://example.com", BASE) for _ in range(10)
        ])

        assert set(links) == {f"{BASE}/3"}
        assert memory_store.calls["insert"] == 1
        assert len(service.locks) == 0

    @pytest.mark.asyncio
    async def test_strict_mode_keeps_distinct_urls_apart(self, memory_store):
        service = URLShorteningService(memory_store, strict_dedup=True)

        links = await asyncio.gather(*[
            service.shorten(f"http://example.com/{i % 3}", BASE) for i in range(9)
        ])

        assert len(set(links)) == 3
        assert memory_store.calls["insert"] == 3

    @pytest.mark.asyncio
    async def test_strict_mode_uses_concurrently_inserted_row(self):
        store = LateWriterStore()
        service = URLShorteningService(store, strict_dedup=True)

        link = await service.shorten("http://example.com", BASE)

        assert link == f"{BASE}/{encode(1)}"
        assert store.rows() == [(1, "http://example.com")]
        assert store.calls["find_id_by_url"] == 2

    @pytest.mark.asyncio
    async def test_best_effort_mode_surfaces_duplicate_conflicts(self):
        service = URLShorteningService(LateWriterStore())

        with pytest.raises(DuplicateUrlError):
            await service.shorten("http://example.com", BASE)

    @pytest.mark.asyncio
    async def test_services_can_share_a_lock_registry(self, memory_store):
        locks = KeyedLock()
        first = URLShorteningService(memory_store, strict_dedup=True, locks=locks)
        second = URLShorteningService(memory_store, strict_dedup=True, locks=locks)

        links = await asyncio.gather(
            first.shorten("http://example.com", BASE),
            second.shorten("http://example.com", BASE),
        )

        assert links[0] == links[1]
        assert memory_store.calls["insert"] == 1
