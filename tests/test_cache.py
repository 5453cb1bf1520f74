"""Tests for the LRU cache and performance bookkeeping."""

from __future__ import annotations

import pytest

from mdoutline.core.cache import LRUCache
from mdoutline.core.monitor import PerformanceMonitor


def test_lru_evicts_least_recently_used() -> None:
    """Reading an entry protects it from the next eviction."""
    cache: LRUCache[str, int] = LRUCache(max_size=2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1

    cache.put("c", 3)
    assert "b" not in cache
    assert cache.keys() == ["a", "c"]
    assert len(cache) == 2


def test_lru_stats_and_clear() -> None:
    """Hits, misses and evictions are counted; clear empties the cache."""
    cache: LRUCache[str, int] = LRUCache(max_size=1)
    cache.put("a", 1)
    cache.get("a")
    cache.get("missing")
    cache.put("b", 2)

    stats = cache.stats()
    assert (stats.size, stats.capacity, stats.hits, stats.misses, stats.evictions) == (1, 1, 1, 1, 1)
    assert stats.hit_rate == 0.5

    before = stats.last_cleared
    cache.remove("b")
    cache.clear()
    assert len(cache) == 0
    assert cache.stats().last_cleared >= before


def test_lru_rejects_zero_capacity() -> None:
    """A cache must hold at least one entry."""
    with pytest.raises(ValueError):
        LRUCache(max_size=0)


def test_performance_monitor_tracks_moving_average() -> None:
    """Averages, failures and slow runs are tracked per operation."""
    monitor = PerformanceMonitor(slow_threshold_ms=100)
    assert monitor.record_operation("parse", 10) is False
    assert monitor.record_operation("parse", 30, success=False) is False
    assert monitor.record_operation("parse", 250) is True

    metrics = monitor.get_metrics()["parse"]
    assert metrics.count == 3
    assert metrics.failures == 1
    assert metrics.slow_count == 1
    assert metrics.average_ms == pytest.approx(290 / 3)
    assert monitor.moving_averages()["parse"] == pytest.approx(135.0)

    monitor.reset_metrics()
    assert monitor.get_metrics() == {}
