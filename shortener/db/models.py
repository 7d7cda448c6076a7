"""
Database Models for the URL Shortener

ShortenedUrl is the only table. The short token is never stored: it is
always derived from the id by the codec.

Design Decisions:
- id is an auto-incrementing primary key starting at 1 (codec input)
- long_url is kept verbatim in a TEXT column
- long_url_hash (SHA-256 hex) gives an indexed equality lookup, since TEXT
  columns cannot be indexed portably; lookups still compare long_url itself
- The unique index on long_url_hash is only created in strict dedup mode
  (see STRICT_DEDUP_INDEX and shortener.db.session.init_models)
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, MetaData, String, Table, Text
from sqlmodel import Field, SQLModel


def hash_url(long_url: str) -> str:
    """Return the hex SHA-256 digest used to index long_url."""
    return hashlib.sha256(long_url.encode("utf-8")).hexdigest()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShortenedUrl(SQLModel, table=True):
    """
    Main table storing shortened URLs.

    Fields:
    - id: Auto-incrementing primary key (encoded into the public token)
    - long_url: The URL exactly as submitted
    - long_url_hash: SHA-256 of long_url, indexed for find-by-url
    - created_at: Insert timestamp
    """
    __tablename__ = "shortened_urls"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger().with_variant(Integer(), "sqlite"),  # SQLite only autoincrements INTEGER keys
            primary_key=True,
            autoincrement=True,
        ),
    )
    long_url: str = Field(sa_column=Column(Text, nullable=False))
    long_url_hash: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        max_length=64
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


# Unique index created on demand by init_models(strict_dedup=True). It is
# bound to a detached Table so create_all() never emits it.
_strict_table = Table(
    ShortenedUrl.__tablename__,
    MetaData(),
    Column("long_url_hash", String(64), nullable=False),
)
STRICT_DEDUP_INDEX = Index(
    "uq_shortened_urls_long_url_hash",
    _strict_table.c.long_url_hash,
    unique=True,
)
