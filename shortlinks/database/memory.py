"""In-process link store, selected with a ``memory://`` connection string.

Data lives only as long as the process. Every mutation runs under one
asyncio lock, which gives the same atomicity the PostgreSQL store gets from
its UNIQUE constraint and single-statement increments.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from ..errors import DuplicateSlugError
from .base import LinkStoreBase
from .models import SEARCH_FIELDS, LinkPage, LinkQuery, LinkRecord, LinkStatistics

_MIN_DATETIME = datetime.min.replace(tzinfo=timezone.utc)


class MemoryLinkStore(LinkStoreBase):
    """Dictionary-backed link store."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, LinkRecord] = {}
        self._lock = asyncio.Lock()

    async def create(self, record: LinkRecord) -> LinkRecord:
        async with self._lock:
            if record.short_slug in self._records:
                self.logger.warning(f"Slug already exists: {record.short_slug}")
                raise DuplicateSlugError(record.short_slug)

            stored = replace(
                record,
                visits=0,
                is_active=True,
                created_at=datetime.now(timezone.utc),
                last_accessed=None,
            )
            self._records[stored.short_slug] = stored

        self.logger.info(f"Created link: {stored.short_slug} -> {stored.original_url}")
        return replace(stored)

    async def find_by_slug(
        self,
        slug: str,
        active_only: bool = False,
    ) -> Optional[LinkRecord]:
        record = self._records.get(slug)
        if record is None or (active_only and not record.is_active):
            return None
        # Copies keep callers from mutating stored state
        return replace(record)

    async def slug_exists(self, slug: str) -> bool:
        return slug in self._records

    async def increment_visit(self, slug: str) -> bool:
        async with self._lock:
            record = self._records.get(slug)
            if record is None or not record.is_active:
                return False
            record.visits += 1
            record.last_accessed = datetime.now(timezone.utc)
        return True

    async def soft_delete(self, slug: str) -> Optional[LinkRecord]:
        async with self._lock:
            record = self._records.get(slug)
            if record is None:
                return None
            record.is_active = False
            return replace(record)

    async def list_links(self, query: LinkQuery) -> LinkPage:
        needle = query.search.lower()

        def matches(record: LinkRecord) -> bool:
            if query.active is not None and record.is_active != query.active:
                return False
            if needle:
                return any(needle in getattr(record, f).lower() for f in SEARCH_FIELDS)
            return True

        selected = [r for r in self._records.values() if matches(r)]

        # Stable sorts: slug first, then the requested column
        selected.sort(key=lambda r: r.short_slug)
        column = query.sort_column
        selected.sort(
            key=lambda r: (getattr(r, column) is not None, getattr(r, column) or _sort_default(column)),
            reverse=query.descending,
        )

        window = selected[query.offset:query.offset + query.limit]
        return LinkPage(
            records=[replace(r) for r in window],
            total=len(selected),
            page=query.page,
            limit=query.limit,
        )

    async def get_statistics(self) -> LinkStatistics:
        records = list(self._records.values())
        active = [r for r in records if r.is_active]
        return LinkStatistics(
            total_urls=len(records),
            active_urls=len(active),
            total_visits=sum(r.visits for r in active),
        )

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._records.clear()


def _sort_default(column: str):
    if column in ("created_at", "last_accessed"):
        return _MIN_DATETIME
    if column == "visits":
        return 0
    return ""
