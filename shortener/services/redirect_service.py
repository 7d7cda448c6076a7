"""
Redirect Service

This service maps a public token back to its long URL.

Outcomes per request:
- MalformedTokenError: token has characters outside the codec alphabet;
  the store is never queried
- NotFoundError: well-formed token, no stored URL for its identifier.
  Tokens longer than max_token_length cannot name a stored row and are
  answered without decoding them or querying the store
- StorageError: the store failed
- otherwise the stored long URL, unchanged
"""

import logging

from shortener.core.codec import check_token, decode
from shortener.core.exceptions import InvalidCharacterError, MalformedTokenError, NotFoundError, StorageError
from shortener.db.interface import URLStore

logger = logging.getLogger(__name__)

# encode(2**63 - 1) is 12 symbols long
MAX_TOKEN_LENGTH = 32


class RedirectService:
    """Resolution protocol over a URLStore."""

    def __init__(self, store: URLStore, max_token_length: int = MAX_TOKEN_LENGTH):
        self.store = store
        self.max_token_length = max_token_length

    async def resolve(self, token: str) -> str:
        """
        Get the original URL for a token.

        Raises:
            MalformedTokenError: If the token cannot be decoded
            NotFoundError: If nothing is stored for the decoded identifier
            StorageError: If the store fails
        """
        try:
            if len(token) > self.max_token_length:
                check_token(token)
                raise NotFoundError(None, token=token)
            identifier = decode(token)
        except InvalidCharacterError as e:
            raise MalformedTokenError(token, reason=str(e)) from e

        try:
            return await self.store.find_url_by_id(identifier)
        except (NotFoundError, StorageError):
            raise
        except Exception as e:
            logger.error(f"find_url_by_id failed for {identifier}: {e}", exc_info=True)
            raise StorageError(f"find_url_by_id failed: {e}", original_error=e) from e
