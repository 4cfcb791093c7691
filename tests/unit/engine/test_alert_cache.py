"""
Unit tests for the alert payload cache.
"""

from datetime import datetime

import pytest

from resourceplanner.engine.alert_cache import AlertCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return AlertCache(ttl_seconds=60, max_entries=2, clock=clock)


class TestAlertCache:

    def test_miss_then_hit(self, cache):
        assert cache.get("k") is None
        cache.set("k", "payload")
        assert cache.get("k") == "payload"
        assert cache.stats.hits == 1
        assert cache.stats.misses == 1

    def test_entries_expire(self, cache, clock):
        cache.set("k", "payload")
        clock.now += 59
        assert cache.get("k") == "payload"
        clock.now += 1
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_oldest_entry_is_evicted(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3
        assert cache.stats.evictions == 1

    def test_invalidate_clears_everything(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_value_loaded_before_invalidation_is_dropped(self, cache):
        generation = cache.generation
        cache.invalidate()
        cache.set("k", "stale", generation=generation)
        assert cache.get("k") is None

        cache.set("k", "fresh", generation=cache.generation)
        assert cache.get("k") == "fresh"

    def test_zero_ttl_disables_caching(self, clock):
        cache = AlertCache(ttl_seconds=0, clock=clock)
        cache.set("k", "payload")
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_key_includes_current_week(self):
        monday = AlertCache.make_key("all", "2024-03-01", "2024-03-31", None, datetime(2024, 3, 11))
        sunday = AlertCache.make_key("all", "2024-03-01", "2024-03-31", None, datetime(2024, 3, 17))
        next_week = AlertCache.make_key("all", "2024-03-01", "2024-03-31", None, datetime(2024, 3, 18))
        assert monday == sunday
        assert monday != next_week

    def test_key_distinguishes_request_parameters(self):
        now = datetime(2024, 3, 13)
        base = AlertCache.make_key(None, "2024-03-01", "2024-03-31", None, now)
        assert base == AlertCache.make_key("all", "2024-03-01", "2024-03-31", "all", now)
        assert base != AlertCache.make_key("Design", "2024-03-01", "2024-03-31", None, now)
        assert base != AlertCache.make_key(None, "2024-03-01", "2024-03-31", "critical", now)
