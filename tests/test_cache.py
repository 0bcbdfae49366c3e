"""Tests for IdentityCache."""

import pytest

from slackbone.slack.cache import IdentityCache
from slackbone.slack.errors import NotFoundError


class Counter:
    def __init__(self, value="payload"):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


class TestGetSet:
    def test_missing_key(self, cache):
        assert cache.get("users.list") is None

    def test_set_then_get(self, cache):
        cache.set("users.list", {"ok": True})
        assert cache.get("users.list") == {"ok": True}

    def test_expires_after_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance(59.9)
        assert cache.get("k") == "v"
        clock.advance(0.1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_set_overwrites_and_resets_ttl(self, cache, clock):
        cache.set("k", "old")
        clock.advance(50)
        cache.set("k", "new")
        clock.advance(50)
        assert cache.get("k") == "new"

    def test_invalidate_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        cache.clear()
        assert len(cache) == 0


class TestGetOrCompute:
    @pytest.mark.asyncio
    async def test_computes_once_within_ttl(self, cache, clock):
        compute = Counter()
        assert await cache.get_or_compute("k", compute) == "payload"
        clock.advance(30)
        assert await cache.get_or_compute("k", compute) == "payload"
        assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_recomputes_after_expiry(self, cache, clock):
        compute = Counter()
        await cache.get_or_compute("k", compute)
        clock.advance(61)
        await cache.get_or_compute("k", compute)
        assert compute.calls == 2

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, cache):
        first, second = Counter("a"), Counter("b")
        assert await cache.get_or_compute("one", first) == "a"
        assert await cache.get_or_compute("two", second) == "b"
        assert (first.calls, second.calls) == (1, 1)

    @pytest.mark.asyncio
    async def test_failed_compute_is_not_stored(self, cache):
        async def failing():
            raise NotFoundError("nope")

        with pytest.raises(NotFoundError):
            await cache.get_or_compute("k", failing)
        assert cache.get("k") is None

    @pytest.mark.asyncio
    async def test_custom_ttl(self, clock):
        cache = IdentityCache(ttl_s=5, clock=clock)
        compute = Counter()
        await cache.get_or_compute("k", compute)
        clock.advance(6)
        await cache.get_or_compute("k", compute)
        assert compute.calls == 2
