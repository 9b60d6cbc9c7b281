"""Unit tests for MemoryCacheProvider."""

from __future__ import annotations

import pytest

from event_enricher.providers.cache.memory_cache import MemoryCacheProvider


class FakeTimer:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# ======================================================================
# Basic operations
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def cache(self) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=3600)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("berlin+germany", "value1")
        assert await cache.get("berlin+germany") == "value1"

    @pytest.mark.asyncio
    async def test_set_overwrites_existing(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "old")
        await cache.set("key1", "new")
        assert await cache.get("key1") == "new"

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        await cache.delete("key1")
        assert await cache.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("nonexistent")

    @pytest.mark.asyncio
    async def test_exists(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", ["techno"])
        assert await cache.exists("key1") is True
        assert await cache.exists("missing") is False

    @pytest.mark.asyncio
    async def test_empty_list_is_a_hit(self, cache: MemoryCacheProvider) -> None:
        await cache.set("unknown artist", [])
        assert await cache.get("unknown artist") == []

    @pytest.mark.asyncio
    async def test_none_cannot_be_stored(self, cache: MemoryCacheProvider) -> None:
        with pytest.raises(ValueError):
            await cache.set("key1", None)

    @pytest.mark.asyncio
    async def test_lru_eviction_at_max_size(self) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=None)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.get("a")
        await cache.set("c", 3)
        assert await cache.get("b") is None
        assert await cache.get("a") == 1
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_unbounded_cache_never_evicts(self) -> None:
        cache = MemoryCacheProvider(max_size=None, ttl=None, name="cities")
        for i in range(5000):
            await cache.set(f"city-{i}+", i)

        assert len(cache) == 5000
        assert await cache.get("city-0+") == 0
        assert await cache.get("city-4999+") == 4999


# ======================================================================
# Expiry and sweeping
# ======================================================================


class TestMemoryCacheExpiry:
    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self) -> None:
        timer = FakeTimer()
        cache = MemoryCacheProvider(max_size=10, ttl=600, timer=timer)
        await cache.set("city:nowhere", "error")

        timer.now = 599
        assert await cache.get("city:nowhere") == "error"

        timer.now = 601
        assert await cache.get("city:nowhere") is None

    @pytest.mark.asyncio
    async def test_set_resets_ttl(self) -> None:
        timer = FakeTimer()
        cache = MemoryCacheProvider(max_size=10, ttl=600, timer=timer)
        await cache.set("k", 1)
        timer.now = 500
        await cache.set("k", 2)
        timer.now = 1000
        assert await cache.get("k") == 2

    @pytest.mark.asyncio
    async def test_sweep_reclaims_expired_entries(self) -> None:
        timer = FakeTimer()
        cache = MemoryCacheProvider(max_size=10, ttl=600, timer=timer)
        await cache.set("old", 1)
        timer.now = 300
        await cache.set("new", 2)

        timer.now = 700
        assert cache.sweep() == 1
        assert len(cache) == 1
        assert await cache.get("new") == 2

    @pytest.mark.asyncio
    async def test_sweep_is_noop_without_ttl(self) -> None:
        cache = MemoryCacheProvider(max_size=10, ttl=None)
        await cache.set("berlin", 1)
        assert cache.sweep() == 0
        assert len(cache) == 1

    def test_name(self) -> None:
        assert MemoryCacheProvider(name="cities").name == "cities"
