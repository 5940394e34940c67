"""Tests for the redirect cache and its use by the service."""

import pytest

from shortlinks.database.cache import RedisCache
from shortlinks.errors import NotFoundError
from shortlinks.service import LinkService


class DictCache(RedisCache):
    """RedisCache with a dict in place of the Redis client."""

    def __init__(self):
        super().__init__(redis_url="redis://unused")
        self.data = {}

    async def connect(self):
        pass

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value
        return True

    async def delete(self, key):
        return self.data.pop(key, None) is not None

    async def ping(self):
        return True

    async def close(self):
        pass


class StickyCache(DictCache):
    """Cache whose evictions fail, as when Redis errors during delete."""

    async def delete(self, key):
        return False


class HookedCache(DictCache):
    """Cache running a callback before each write."""

    def __init__(self):
        super().__init__()
        self.before_set = None

    async def set(self, key, value, ttl=None):
        if self.before_set:
            await self.before_set()
        return await super().set(key, value, ttl)


class TestRedisCache:

    async def test_disabled_without_url(self):
        cache = RedisCache()
        await cache.connect()

        assert not cache.enabled
        assert await cache.get("anything") is None
        assert not await cache.set("anything", "value")
        assert not await cache.ping()

    async def test_unreachable_server_disables_cache(self, logger):
        cache = RedisCache(redis_url="redis://127.0.0.1:1/0", logger=logger)
        await cache.connect()

        assert not cache.enabled
        assert await cache.get("anything") is None
        await cache.close()

    def test_cache_key(self):
        assert RedisCache.get_cache_key("my-link") == "shortlinks:target:my-link"


class TestServiceWithCache:

    @pytest.fixture
    def cache(self):
        return DictCache()

    @pytest.fixture
    def cached_service(self, test_db, cache, logger):
        return LinkService(store=test_db, cache=cache, logger=logger)

    async def test_create_populates_cache(self, cached_service, cache):
        await cached_service.create_link("https://example.com", custom_slug="cached")

        assert cache.data == {"shortlinks:target:cached": "https://example.com"}

    async def test_cache_hit_still_counts_visit(self, cached_service, cache):
        await cached_service.create_link("https://example.com", custom_slug="cached")

        assert await cached_service.resolve_redirect("cached") == "https://example.com"
        assert (await cached_service.get_link_stats("cached")).visits == 1

    async def test_delete_evicts(self, cached_service, cache):
        await cached_service.create_link("https://example.com", custom_slug="evicted")
        await cached_service.delete_link("evicted")

        assert cache.data == {}

    async def test_health_includes_cache(self, cached_service):
        assert await cached_service.health_check() == {
            "database": True,
            "cache": True,
            "overall": True,
        }

    async def test_deleted_link_not_served_when_eviction_fails(self, test_db, logger):
        cache = StickyCache()
        service = LinkService(store=test_db, cache=cache, logger=logger)
        await service.create_link("https://example.com", custom_slug="gone")
        await service.delete_link("gone")
        assert "shortlinks:target:gone" in cache.data

        with pytest.raises(NotFoundError):
            await service.resolve_redirect("gone")

        assert (await service.get_link_stats("gone")).visits == 0

    async def test_delete_during_redirect_does_not_leave_stale_target(self, test_db, logger):
        cache = HookedCache()
        service = LinkService(store=test_db, cache=cache, logger=logger)
        await service.create_link("https://example.com", custom_slug="race")
        cache.data.clear()

        async def delete_concurrently():
            cache.before_set = None
            await service.delete_link("race")

        # The delete lands after the store lookup and before the cache write
        cache.before_set = delete_concurrently

        with pytest.raises(NotFoundError):
            await service.resolve_redirect("race")
        assert cache.data == {}

        with pytest.raises(NotFoundError):
            await service.resolve_redirect("race")
