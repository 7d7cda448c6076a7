"""
In-Memory URL Store

Process-local URLStore used by the test suite and by DATABASE_URL=memory://.
Data is lost when the process exits.
"""

import asyncio
from collections import Counter
from typing import Dict, List, Optional

from shortener.core.exceptions import DuplicateUrlError, NotFoundError
from shortener.db.interface import URLStore


class MemoryURLStore(URLStore):
    """
    Dict-backed persistence port.

    Identifiers are assigned from 1 upwards. Every port call is counted in
    `calls`, keyed by operation name, so callers can assert which I/O happened.
    """

    def __init__(self, unique_urls: bool = False):
        """
        Args:
            unique_urls: Reject a second insert of the same URL with
                DuplicateUrlError, like a unique index would
        """
        self.unique_urls = unique_urls
        self.calls: Counter = Counter()
        self._urls: Dict[int, str] = {}
        self._next_id = 1

    async def insert(self, long_url: str) -> int:
        """
        Store long_url under the next identifier.

        Raises:
            DuplicateUrlError: If unique_urls is set and long_url is already stored
        """
        self.calls["insert"] += 1
        await asyncio.sleep(0)

        if self.unique_urls and long_url in self._urls.values():
            raise DuplicateUrlError(long_url)

        identifier = self._next_id
        self._next_id += 1
        self._urls[identifier] = long_url
        return identifier

    async def find_url_by_id(self, identifier: int) -> str:
        """
        Return the URL stored under identifier.

        Raises:
            NotFoundError: If no URL has that identifier
        """
        self.calls["find_url_by_id"] += 1
        await asyncio.sleep(0)

        try:
            return self._urls[identifier]
        except KeyError:
            raise NotFoundError(identifier) from None

    async def find_id_by_url(self, long_url: str) -> Optional[int]:
        """Return the lowest identifier holding exactly long_url, or None."""
        self.calls["find_id_by_url"] += 1
        await asyncio.sleep(0)

        for identifier, stored in self._urls.items():
            if stored == long_url:
                return identifier
        return None

    def rows(self) -> List[tuple]:
        """Return stored (identifier, long_url) pairs in insertion order."""
        return list(self._urls.items())
