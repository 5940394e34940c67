"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import LinkPage, LinkQuery, LinkRecord, LinkStatistics


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Implementations must enforce slug uniqueness and visit increments
    atomically; callers never rely on a prior read for either.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Storage connection string
        """
        self.db_config = db_config

    async def connect(self) -> None:
        """Open connections and prepare storage. Raises StorageFailureError."""

    @abstractmethod
    async def create(self, record: LinkRecord) -> LinkRecord:
        """Insert a new link record.

        Args:
            record: The record to insert (created_at is assigned by the store)

        Returns:
            The persisted record

        Raises:
            DuplicateSlugError: If the slug is already stored, active or not
        """

    @abstractmethod
    async def find_by_slug(
        self,
        slug: str,
        active_only: bool = False,
    ) -> Optional[LinkRecord]:
        """Find a record by slug.

        Args:
            slug: The slug to look up
            active_only: Skip soft-deleted records

        Returns:
            The record, or None if not found
        """

    @abstractmethod
    async def slug_exists(self, slug: str) -> bool:
        """Check whether a slug is taken by any record, active or not."""

    @abstractmethod
    async def increment_visit(self, slug: str) -> bool:
        """Atomically add one visit and stamp last_accessed.

        Returns:
            True if a record was updated
        """

    @abstractmethod
    async def soft_delete(self, slug: str) -> Optional[LinkRecord]:
        """Mark a record inactive. Deleting an inactive record succeeds.

        Returns:
            The updated record, or None if the slug is unknown
        """

    @abstractmethod
    async def list_links(self, query: LinkQuery) -> LinkPage:
        """Return one page of records matching the query plus the total count."""

    @abstractmethod
    async def get_statistics(self) -> LinkStatistics:
        """Count all records, active records and visits on active records."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if storage is reachable.

        Returns:
            True if healthy, False otherwise
        """

    @abstractmethod
    async def close(self) -> None:
        """Close storage connections."""
