"""Business logic service for shortlinks."""

import logging
from typing import Dict, Optional

from .slug import SlugGenerator
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.models import LinkPage, LinkQuery, LinkRecord, LinkStatistics
from .common.validators import is_valid_url, is_valid_slug
from .errors import (
    DuplicateSlugError,
    GenerationExhaustedError,
    InvalidSlugFormatError,
    InvalidURLError,
    MissingURLError,
    NotFoundError,
    SlugTakenError,
    StorageFailureError,
)


class LinkService:
    """Service layer for link creation, redirects and administration."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        slug_generator: Optional[SlugGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize link service.

        Args:
            store: Link store instance
            cache: Optional redirect cache
            slug_generator: Optional slug generator
            logger: Optional logger
            max_collision_retries: Generated slugs to try before giving up
        """
        self.store = store
        self.cache = cache
        self.generator = slug_generator or SlugGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries

    async def create_link(
        self,
        original_url: Optional[str],
        custom_slug: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> LinkRecord:
        """Create a new short link.

        Args:
            original_url: The URL to redirect to
            custom_slug: Optional user-chosen slug
            title: Optional title
            description: Optional description

        Returns:
            The persisted record

        Raises:
            MissingURLError: If no URL was given
            InvalidURLError: If the URL is not absolute
            InvalidSlugFormatError: If the custom slug is malformed
            SlugTakenError: If the slug is already in use
            GenerationExhaustedError: If every generated slug collided
        """
        original_url = (original_url or "").strip()
        if not original_url:
            raise MissingURLError()
        if not is_valid_url(original_url):
            raise InvalidURLError()

        if custom_slug:
            if not is_valid_slug(custom_slug):
                raise InvalidSlugFormatError()

            # Fast path only; the store's unique constraint is authoritative
            if await self.store.slug_exists(custom_slug):
                raise SlugTakenError()

            slug = custom_slug
        else:
            slug = await self._generate_unique_slug()

        record = LinkRecord(
            original_url=original_url,
            short_slug=slug,
            title=(title or "").strip(),
            description=(description or "").strip(),
        )

        try:
            created = await self.store.create(record)
        except DuplicateSlugError:
            # Another request inserted the slug between the check and the insert
            self.logger.warning(f"Lost slug race for {slug}")
            raise SlugTakenError("Slug already exists, please try again")

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(slug), created.original_url)

        self.logger.info(f"Created link: {slug} -> {created.original_url}")
        return created

    async def resolve_redirect(self, slug: str) -> str:
        """Resolve an active slug to its target and count the visit.

        Args:
            slug: The slug to resolve

        Returns:
            The original URL

        Raises:
            NotFoundError: If no active record has this slug
        """
        original_url = None
        if self.cache:
            original_url = await self.cache.get(self.cache.get_cache_key(slug))
            if original_url:
                self.logger.debug(f"Cache hit for {slug}")

        if not original_url:
            record = await self.store.find_by_slug(slug, active_only=True)
            if record is None:
                self.logger.warning(f"Slug not found: {slug}")
                raise NotFoundError("Short URL not found")
            original_url = record.original_url

            if self.cache:
                await self.cache.set(self.cache.get_cache_key(slug), original_url)

        # The store is authoritative: a cached target may belong to a link
        # deactivated since it was cached. A failed increment loses one count
        # but never the redirect.
        try:
            counted = await self.store.increment_visit(slug)
        except StorageFailureError as e:
            self.logger.warning(f"Visit not counted for {slug}: {e}")
        else:
            if not counted:
                self.logger.warning(f"Slug no longer active: {slug}")
                if self.cache:
                    await self.cache.delete(self.cache.get_cache_key(slug))
                raise NotFoundError("Short URL not found")

        self.logger.debug(f"Resolved {slug} -> {original_url}")
        return original_url

    async def get_link_stats(self, slug: str) -> LinkRecord:
        """Get a record, active or not.

        Raises:
            NotFoundError: If the slug is unknown
        """
        record = await self.store.find_by_slug(slug)
        if record is None:
            raise NotFoundError()
        return record

    async def delete_link(self, slug: str) -> LinkRecord:
        """Soft-delete a link. Deleting an already inactive link succeeds.

        Raises:
            NotFoundError: If the slug is unknown
        """
        record = await self.store.soft_delete(slug)
        if record is None:
            raise NotFoundError()

        if self.cache:
            await self.cache.delete(self.cache.get_cache_key(slug))

        self.logger.info(f"Deleted link: {slug}")
        return record

    async def list_links(self, query: LinkQuery) -> LinkPage:
        return await self.store.list_links(query)

    async def get_statistics(self) -> LinkStatistics:
        return await self.store.get_statistics()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def _generate_unique_slug(self) -> str:
        """Generate a slug not present in the store.

        Raises:
            GenerationExhaustedError: If every attempt collided
        """
        for attempt in range(self.max_collision_retries):
            slug = self.generator.generate()

            if not await self.store.slug_exists(slug):
                self.logger.debug(f"Generated slug after {attempt + 1} attempts: {slug}")
                return slug

        self.logger.error(
            f"Unable to generate unique slug after {self.max_collision_retries} attempts"
        )
        raise GenerationExhaustedError()

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
