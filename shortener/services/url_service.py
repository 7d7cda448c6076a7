"""
URL Shortening Service

This service turns a submitted URL into a public short link:
1. Validate the URL (no storage access on failure)
2. Reuse the identifier of an existing row holding exactly this URL
3. Otherwise insert the URL and take the new identifier
4. Encode the identifier and append the token to the public base

CHECK_THEN_INSERT_RACE:
Steps 2 and 3 are two separate storage calls. In best-effort mode two
concurrent first submissions of one URL can both miss in step 2 and both
insert, leaving two rows (and two tokens) for that URL. Both tokens resolve
correctly; the table just holds a duplicate.

Strict dedup mode closes the race:
- within a process, steps 2-3 run under a lock keyed on the exact URL
- across processes, the store rejects the second insert (unique index) with
  DuplicateUrlError and the service re-reads the winning row
"""

import logging
from typing import Iterable, Optional

from shortener.core.codec import encode
from shortener.core.exceptions import DuplicateUrlError, StorageError
from shortener.core.validators import DEFAULT_SCHEMES, validate_url
from shortener.db.interface import URLStore
from shortener.services.locks import KeyedLock

logger = logging.getLogger(__name__)


def build_short_link(base: str, token: str) -> str:
    """
    Join the public base and a token with a single path separator.

    Example:
        build_short_link("https://sho.rt/", "f") -> "https://sho.rt/f"
    """
    return f"{base.rstrip('/')}/{token}"


class URLShorteningService:
    """
    Shortening protocol over a URLStore.

    Stateless apart from the optional lock registry, so one instance can
    serve concurrent requests.
    """

    def __init__(
        self,
        store: URLStore,
        strict_dedup: bool = False,
        allowed_schemes: Iterable[str] = DEFAULT_SCHEMES,
        locks: Optional[KeyedLock] = None,
    ):
        """
        Args:
            store: Persistence port
            strict_dedup: Serialize check-then-insert per URL and recover
                from DuplicateUrlError
            allowed_schemes: URL schemes accepted by validation
            locks: Lock registry to share between service instances; one is
                created when strict_dedup is set and none is given
        """
        self.store = store
        self.strict_dedup = strict_dedup
        self.allowed_schemes = frozenset(allowed_schemes)
        if strict_dedup and locks is None:
            locks = KeyedLock()
        self.locks = locks

    async def shorten(self, url: str, base: str) -> str:
        """
        Shorten url and return the public short link.

        Raises:
            InvalidUrlFormatError: If url is rejected by validation
            StorageError: If the store fails
        """
        token = await self.shorten_to_token(url)
        return build_short_link(base, token)

    async def shorten_to_token(self, url: str) -> str:
        """Shorten url and return only the token."""
        validate_url(url, allowed_schemes=self.allowed_schemes)

        if self.strict_dedup:
            async with self.locks.acquire(url):
                identifier = await self._get_or_insert(url)
        else:
            identifier = await self._get_or_insert(url)

        return encode(identifier)

    async def _get_or_insert(self, url: str) -> int:
        existing_id = await self._call(self.store.find_id_by_url, url)
        if existing_id is not None:
            logger.debug(f"Reusing identifier {existing_id} for {url}")
            return existing_id

        try:
            identifier = await self._call(self.store.insert, url)
        except DuplicateUrlError:
            if not self.strict_dedup:
                raise
            # Another process inserted the URL between our lookup and insert
            identifier = await self._call(self.store.find_id_by_url, url)
            if identifier is None:
                raise
            logger.info(f"Concurrent insert detected, using identifier {identifier} for {url}")
            return identifier

        logger.info(f"Stored new URL with identifier {identifier}")
        return identifier

    @staticmethod
    async def _call(operation, *args):
        """Run a store operation, wrapping foreign exceptions in StorageError."""
        try:
            return await operation(*args)
        except StorageError:
            raise
        except Exception as e:
            name = getattr(operation, "__name__", "store operation")
            logger.error(f"{name} failed: {e}", exc_info=True)
            raise StorageError(f"{name} failed: {e}", original_error=e) from e
