"""Storage layer for shortlinks."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkStoreBase
from .cache import RedisCache
from .memory import MemoryLinkStore
from .models import LinkPage, LinkQuery, LinkRecord, LinkStatistics
from .postgres import PostgresLinkStore

__all__ = [
    "LinkStoreBase",
    "MemoryLinkStore",
    "PostgresLinkStore",
    "RedisCache",
    "LinkPage",
    "LinkQuery",
    "LinkRecord",
    "LinkStatistics",
    "create_link_store",
]

POSTGRES_SCHEMES = ("postgres", "postgresql")


def create_link_store(
    database_url: str,
    database_name: Optional[str] = None,
    table: str = "urls",
    create_tables: bool = True,
    logger: Optional[logging.Logger] = None,
) -> LinkStoreBase:
    """Pick a store implementation from the connection string scheme."""
    scheme = urlparse(database_url).scheme.lower()

    if scheme == "memory":
        return MemoryLinkStore(database_url, logger=logger)

    if scheme in POSTGRES_SCHEMES:
        return PostgresLinkStore(
            db_config=database_url,
            database=database_name,
            table=table,
            create_tables=create_tables,
            logger=logger,
        )

    raise ValueError(f"Unsupported storage scheme: {scheme or database_url!r}")
