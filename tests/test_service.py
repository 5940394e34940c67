"""Tests for service layer."""

import asyncio
import re

import pytest

from shortlinks.database.memory import MemoryLinkStore
from shortlinks.database.models import LinkQuery
from shortlinks.errors import (
    DuplicateSlugError,
    GenerationExhaustedError,
    InvalidSlugFormatError,
    InvalidURLError,
    MissingURLError,
    NotFoundError,
    SlugTakenError,
    StorageFailureError,
)
from shortlinks.service import LinkService
from shortlinks.slug import SlugGenerator


class FixedSlugGenerator(SlugGenerator):
    """Generator returning a scripted sequence of slugs."""

    def __init__(self, slugs):
        super().__init__()
        self._slugs = iter(slugs)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return next(self._slugs)


class CountingStore(MemoryLinkStore):
    """Memory store that records which methods were called."""

    def __init__(self):
        super().__init__()
        self.calls = []

    async def slug_exists(self, slug):
        self.calls.append("slug_exists")
        return await super().slug_exists(slug)

    async def create(self, record):
        self.calls.append("create")
        return await super().create(record)


class RacingStore(MemoryLinkStore):
    """Store whose existence check misses a slug inserted by a concurrent request."""

    async def slug_exists(self, slug):
        return False


class FailingIncrementStore(MemoryLinkStore):

    async def increment_visit(self, slug):
        raise StorageFailureError("connection reset")


class TestCreateLink:
    """Creation flow."""

    async def test_create_generated_slug(self, service, sample_urls):
        record = await service.create_link(sample_urls[0])

        assert record.original_url == sample_urls[0]
        assert 5 <= len(record.short_slug) <= 8
        assert re.fullmatch(r"[A-Za-z0-9_-]+", record.short_slug)
        assert record.created_at is not None
        assert record.visits == 0
        assert record.is_active

    async def test_create_trims_fields(self, service):
        record = await service.create_link(
            "  https://example.com/trim  ",
            title="  Title ",
            description=" Desc  ",
        )

        assert record.original_url == "https://example.com/trim"
        assert record.title == "Title"
        assert record.description == "Desc"

    async def test_create_defaults_empty_text(self, service, sample_urls):
        record = await service.create_link(sample_urls[0])
        assert record.title == ""
        assert record.description == ""

    async def test_create_with_custom_slug(self, service, sample_urls):
        record = await service.create_link(sample_urls[0], custom_slug="my-link")
        assert record.short_slug == "my-link"

    async def test_create_duplicate_custom_slug(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="duplicate")

        with pytest.raises(SlugTakenError):
            await service.create_link(sample_urls[1], custom_slug="duplicate")

    async def test_custom_slug_of_deleted_link_stays_taken(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="retired")
        await service.delete_link("retired")

        with pytest.raises(SlugTakenError):
            await service.create_link(sample_urls[1], custom_slug="retired")

    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_missing_url(self, service, url):
        with pytest.raises(MissingURLError):
            await service.create_link(url)

    @pytest.mark.parametrize("url", ["not-a-url", "example.com", "https://"])
    async def test_invalid_url(self, service, url):
        with pytest.raises(InvalidURLError):
            await service.create_link(url)

    @pytest.mark.parametrize("slug", ["ab", "has space", "!!!", "x" * 51])
    async def test_invalid_slug_rejected_before_storage(self, slug, logger):
        store = CountingStore()
        service = LinkService(store=store, logger=logger)

        with pytest.raises(InvalidSlugFormatError):
            await service.create_link("https://example.com", custom_slug=slug)

        assert store.calls == []

    async def test_generation_retries_collisions(self, test_db, logger):
        generator = FixedSlugGenerator(["taken1", "taken2", "fresh1"])
        service = LinkService(store=test_db, slug_generator=generator, logger=logger)
        await service.create_link("https://a.example", custom_slug="taken1")
        await service.create_link("https://b.example", custom_slug="taken2")

        record = await service.create_link("https://c.example")

        assert record.short_slug == "fresh1"
        assert generator.calls == 3

    async def test_generation_exhausted_after_five_attempts(self, test_db, logger):
        generator = FixedSlugGenerator(["taken"] * 10)
        service = LinkService(store=test_db, slug_generator=generator, logger=logger)
        await service.create_link("https://a.example", custom_slug="taken")

        with pytest.raises(GenerationExhaustedError):
            await service.create_link("https://b.example")

        assert generator.calls == 5

    async def test_generation_exhausted_is_not_storage_failure(self):
        assert not issubclass(GenerationExhaustedError, StorageFailureError)

    async def test_duplicate_slug_is_not_storage_failure(self):
        assert not issubclass(DuplicateSlugError, StorageFailureError)
        assert DuplicateSlugError("x").status_code == 409

    async def test_lost_race_maps_to_slug_taken(self, logger):
        store = RacingStore()
        service = LinkService(store=store, logger=logger)
        await service.create_link("https://a.example", custom_slug="contested")

        with pytest.raises(SlugTakenError):
            await service.create_link("https://b.example", custom_slug="contested")

    async def test_concurrent_custom_slug_creates(self, logger):
        """Only one of many concurrent creates with the same slug succeeds."""
        store = RacingStore()
        service = LinkService(store=store, logger=logger)

        results = await asyncio.gather(
            *(service.create_link(f"https://example.com/{i}", custom_slug="same") for i in range(10)),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, Exception)) == 1
        assert all(isinstance(r, SlugTakenError) for r in results if isinstance(r, Exception))
        assert not any(isinstance(r, DuplicateSlugError) for r in results)


class TestResolveRedirect:
    """Redirect resolution."""

    async def test_resolve_increments_visits(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="go-here")

        assert await service.resolve_redirect("go-here") == sample_urls[0]
        assert await service.resolve_redirect("go-here") == sample_urls[0]

        record = await service.get_link_stats("go-here")
        assert record.visits == 2
        assert record.last_accessed is not None

    async def test_resolve_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.resolve_redirect("nonexistent")

    async def test_resolve_deleted(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="bye-bye")
        await service.delete_link("bye-bye")

        with pytest.raises(NotFoundError):
            await service.resolve_redirect("bye-bye")

    async def test_concurrent_redirects_count_exactly(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="popular")

        await asyncio.gather(*(service.resolve_redirect("popular") for _ in range(50)))

        assert (await service.get_link_stats("popular")).visits == 50

    async def test_increment_failure_does_not_block_redirect(self, logger):
        service = LinkService(store=FailingIncrementStore(), logger=logger)
        await service.create_link("https://example.com/ok", custom_slug="flaky")

        assert await service.resolve_redirect("flaky") == "https://example.com/ok"


class TestAdministration:
    """Stats, delete, listing."""

    async def test_stats_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.get_link_stats("unknown")

    async def test_delete_freezes_stats(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="frozen")
        await service.resolve_redirect("frozen")

        deleted = await service.delete_link("frozen")
        assert deleted.is_active is False

        record = await service.get_link_stats("frozen")
        assert record.visits == 1
        assert record.is_active is False

    async def test_delete_twice_succeeds(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_slug="again")

        await service.delete_link("again")
        record = await service.delete_link("again")

        assert record.is_active is False

    async def test_delete_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_link("unknown")

    async def test_list_and_statistics(self, service, sample_urls):
        for i, url in enumerate(sample_urls):
            await service.create_link(url, custom_slug=f"link-{i}")
        await service.resolve_redirect("link-0")
        await service.delete_link("link-2")

        page = await service.list_links(LinkQuery(active=True))
        assert {r.short_slug for r in page.records} == {"link-0", "link-1"}

        stats = await service.get_statistics()
        assert stats.total_urls == 3
        assert stats.active_urls == 2
        assert stats.total_visits == 1
        assert stats.average_visits == 0.5

    async def test_health_check(self, service):
        health = await service.health_check()

        assert health == {"database": True, "cache": True, "overall": True}
