"""Unit tests for TimedCache and SingleFlight."""

import asyncio

import pytest

from src.utils.cache import SingleFlight, TimedCache


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTimedCache:
    """Test lazy TTL eviction."""

    def test_get_missing_key_returns_none(self):
        cache = TimedCache[str](60)
        assert cache.get("missing") is None

    def test_put_then_get(self):
        cache = TimedCache[str](60)
        cache.put("tomato", "https://example.com/tomato.jpg")
        assert cache.get("tomato") == "https://example.com/tomato.jpg"
        assert "tomato" in cache

    def test_entry_alive_at_exact_ttl(self):
        """Test an entry is only expired once its age exceeds the TTL."""
        clock = FakeClock()
        cache = TimedCache[str](10, clock=clock)
        cache.put("key", "value")

        clock.now = 10.0
        assert cache.get("key") == "value"

    def test_expired_entry_is_evicted_on_lookup(self):
        """Test an expired entry reads as absent and is dropped."""
        clock = FakeClock()
        cache = TimedCache[str](10, clock=clock)
        cache.put("key", "value")
        assert len(cache) == 1

        clock.now = 10.5
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_put_refreshes_timestamp(self):
        clock = FakeClock()
        cache = TimedCache[str](10, clock=clock)
        cache.put("key", "old")
        clock.now = 8.0
        cache.put("key", "new")
        clock.now = 15.0
        assert cache.get("key") == "new"

    def test_clear(self):
        cache = TimedCache[int](60)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_non_positive_ttl_rejected(self, ttl):
        with pytest.raises(ValueError) as exc:
            TimedCache[str](ttl)
        assert "ttl_seconds" in str(exc.value)


class TestSingleFlight:
    """Test in-flight sharing of one computation per key."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_computation(self):
        flight = SingleFlight[str]()
        release = asyncio.Event()
        calls = []

        async def compute():
            calls.append(1)
            await release.wait()
            return "carbonara"

        first = asyncio.ensure_future(flight.run("recipe_carbonara", compute))
        second = asyncio.ensure_future(flight.run("recipe_carbonara", compute))
        await asyncio.sleep(0)
        assert flight.in_flight("recipe_carbonara")

        release.set()
        results = await asyncio.gather(first, second)

        assert results == ["carbonara", "carbonara"]
        assert len(calls) == 1
        assert not flight.in_flight("recipe_carbonara")

    @pytest.mark.asyncio
    async def test_different_keys_run_independently(self):
        flight = SingleFlight[str]()
        calls = []

        async def compute(value):
            calls.append(value)
            return value

        results = await asyncio.gather(
            flight.run("a", lambda: compute("a")),
            flight.run("b", lambda: compute("b")),
        )
        assert results == ["a", "b"]
        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failure_propagates_and_releases_key(self):
        flight = SingleFlight[str]()

        async def boom():
            raise RuntimeError("generation failed")

        with pytest.raises(RuntimeError):
            await flight.run("key", boom)
        await asyncio.sleep(0)
        assert not flight.in_flight("key")
