"""Data models for shortlinks."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


@dataclass
class LinkRecord:
    """A slug to URL mapping as persisted by a link store."""

    original_url: str
    short_slug: str
    title: str = ""
    description: str = ""
    visits: int = 0
    created_at: Optional[datetime] = None
    is_active: bool = True
    last_accessed: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase form used in API responses."""
        return {
            "originalUrl": self.original_url,
            "shortSlug": self.short_slug,
            "title": self.title,
            "description": self.description,
            "visits": self.visits,
            "createdAt": _isoformat(self.created_at),
            "isActive": self.is_active,
            "lastAccessed": _isoformat(self.last_accessed),
        }

    @classmethod
    def from_row(cls, row: Any) -> "LinkRecord":
        """Create from a database row or a mapping with snake_case keys."""
        return cls(
            original_url=row["original_url"],
            short_slug=row["short_slug"],
            title=row["title"] or "",
            description=row["description"] or "",
            visits=row["visits"] or 0,
            created_at=row["created_at"],
            is_active=row["is_active"],
            last_accessed=row["last_accessed"],
        )


# API sort keys mapped to record attributes / column names
SORT_FIELDS = {
    "createdAt": "created_at",
    "visits": "visits",
    "shortSlug": "short_slug",
    "originalUrl": "original_url",
    "title": "title",
    "description": "description",
    "lastAccessed": "last_accessed",
}

SEARCH_FIELDS = ("original_url", "short_slug", "title", "description")


@dataclass
class LinkQuery:
    """Filter, sort and page selection for listing links."""

    active: Optional[bool] = True
    search: str = ""
    sort: str = "createdAt"
    order: str = "desc"
    page: int = 1
    limit: int = 100

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        if self.sort not in SORT_FIELDS:
            self.sort = "createdAt"
        self.order = "asc" if str(self.order).lower() == "asc" else "desc"
        self.search = (self.search or "").strip()

    @property
    def sort_column(self) -> str:
        return SORT_FIELDS[self.sort]

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class LinkPage:
    """One page of a link listing."""

    records: List[LinkRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass
class LinkStatistics:
    """Store-wide counters."""

    total_urls: int = 0
    active_urls: int = 0
    total_visits: int = 0

    @property
    def inactive_urls(self) -> int:
        return self.total_urls - self.active_urls

    @property
    def average_visits(self) -> float:
        if self.active_urls == 0:
            return 0
        return self.total_visits / self.active_urls

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalUrls": self.total_urls,
            "activeUrls": self.active_urls,
            "inactiveUrls": self.inactive_urls,
            "totalVisits": self.total_visits,
            "averageVisits": self.average_visits,
        }
