"""
Test suite for the bounded TTL cache.

Covers expiry on read, FIFO eviction at capacity, overwrite semantics,
statistics, and concurrent access.

System role: Verification of the answer cache
"""

import threading
import time

import pytest

from kb_assistant.core.cache import BoundedTTLCache


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestCacheExpiry:
    """Test suite for TTL handling."""

    def test_get_should_return_value_then_absent_after_ttl(self) -> None:
        """Test 100 ms TTL with the real clock: present now, absent after 150 ms."""
        # Arrange
        cache: BoundedTTLCache[str] = BoundedTTLCache(max_entries=10)

        # Act
        cache.set("k", "v", ttl_seconds=0.1)
        immediate = cache.get("k")
        time.sleep(0.15)
        later = cache.get("k")

        # Assert
        assert immediate == "v"
        assert later is None

    def test_expired_entry_should_be_removed_on_read(self, clock: FakeClock) -> None:
        """Test lazy expiry removes the entry only when it is read."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=10, clock=clock)
        cache.set("a", 1, ttl_seconds=5)

        clock.advance(6)
        assert cache.size() == 1  # not pruned until read

        assert cache.get("a") is None
        assert cache.size() == 0

    def test_entry_should_be_live_exactly_at_ttl(self, clock: FakeClock) -> None:
        """Test boundary: age equal to TTL is still valid."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=10, clock=clock)
        cache.set("a", 1, ttl_seconds=5)

        clock.advance(5)

        assert cache.get("a") == 1

    def test_set_should_use_default_ttl(self, clock: FakeClock) -> None:
        """Test default TTL applies when set() is given none."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(
            max_entries=10, default_ttl_seconds=2, clock=clock
        )
        cache.set("a", 1)

        clock.advance(3)

        assert cache.get("a") is None

    def test_get_missing_key_should_return_none(self) -> None:
        """Test a miss is a normal return, not an error."""
        cache: BoundedTTLCache[int] = BoundedTTLCache()
        assert cache.get("missing") is None


class TestCacheEviction:
    """Test suite for capacity eviction."""

    def test_insert_at_capacity_should_evict_earliest_key(self) -> None:
        """Test filling to N then inserting a new key evicts the first key."""
        # Arrange
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=3)
        for i, key in enumerate(["a", "b", "c"]):
            cache.set(key, i, ttl_seconds=60)

        # Act
        cache.set("d", 3, ttl_seconds=60)

        # Assert
        assert cache.get("a") is None
        assert [cache.get(k) for k in ("b", "c", "d")] == [1, 2, 3]
        assert cache.size() == 3

    def test_size_should_never_exceed_capacity(self) -> None:
        """Test size stays bounded under many inserts."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=5)

        for i in range(50):
            cache.set(f"key-{i}", i, ttl_seconds=60)
            assert len(cache) <= 5

    def test_eviction_should_ignore_recency_of_reads(self) -> None:
        """Test eviction is by insertion order, not access order."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=2)
        cache.set("a", 1, ttl_seconds=60)
        cache.set("b", 2, ttl_seconds=60)
        cache.get("a")

        cache.set("c", 3, ttl_seconds=60)

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_overwrite_should_keep_insertion_position(self) -> None:
        """Test overwriting an existing key neither evicts nor moves it."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=2)
        cache.set("a", 1, ttl_seconds=60)
        cache.set("b", 2, ttl_seconds=60)

        cache.set("a", 10, ttl_seconds=60)
        assert cache.size() == 2
        assert cache.get("a") == 10

        cache.set("c", 3, ttl_seconds=60)
        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_overwrite_should_restamp_entry(self, clock: FakeClock) -> None:
        """Test overwriting replaces the creation time and TTL."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=2, clock=clock)
        cache.set("a", 1, ttl_seconds=5)
        clock.advance(4)
        cache.set("a", 2, ttl_seconds=5)
        clock.advance(4)

        assert cache.get("a") == 2

    def test_invalid_capacity_should_raise(self) -> None:
        with pytest.raises(ValueError):
            BoundedTTLCache(max_entries=0)


class TestCacheHousekeeping:
    """Test suite for clear and statistics."""

    def test_clear_should_empty_cache(self) -> None:
        cache: BoundedTTLCache[int] = BoundedTTLCache()
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear()

        assert cache.size() == 0
        assert cache.get("a") is None

    def test_clear_should_start_new_generation(self) -> None:
        cache: BoundedTTLCache[int] = BoundedTTLCache()
        before = cache.generation

        cache.clear()

        assert cache.generation == before + 1

    def test_set_with_stale_generation_should_be_dropped(self) -> None:
        # Arrange
        cache: BoundedTTLCache[str] = BoundedTTLCache()
        generation = cache.generation
        cache.clear()

        # Act
        stored = cache.set("answer", "computed before the clear", generation=generation)

        # Assert
        assert stored is False
        assert cache.get("answer") is None
        assert cache.size() == 0

    def test_set_with_current_generation_should_store(self) -> None:
        cache: BoundedTTLCache[str] = BoundedTTLCache()
        cache.clear()

        stored = cache.set("answer", "fresh", generation=cache.generation)

        assert stored is True
        assert cache.get("answer") == "fresh"

    def test_get_stats_should_count_hits_and_misses(self) -> None:
        """Test hit rate accounting."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=7)
        cache.set("a", 1)

        cache.get("a")
        cache.get("a")
        cache.get("b")
        cache.get("c")

        stats = cache.get_stats()
        assert stats["hits"] == 2
        assert stats["misses"] == 2
        assert stats["hit_rate"] == pytest.approx(0.5)
        assert stats["size"] == 1
        assert stats["max_size"] == 7

    def test_concurrent_sets_should_respect_capacity(self) -> None:
        """Test the lock keeps the store bounded under threads."""
        cache: BoundedTTLCache[int] = BoundedTTLCache(max_entries=20)

        def writer(offset: int) -> None:
            for i in range(200):
                cache.set(f"{offset}-{i}", i, ttl_seconds=60)
                cache.get(f"{offset}-{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.size() == 20
