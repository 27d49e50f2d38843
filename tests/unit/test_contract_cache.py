"""Tests for per-resolver contract caching under concurrency."""

from __future__ import annotations

import threading
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

import pytest

from contract_resolution.cache import ContractCache, ContractCacheStats
from contract_resolution.config import ResolverConfig
from contract_resolution.contract import Contract, ResolvedMember, build_contract
from contract_resolution.hooks import name_prefix_filter
from contract_resolution.resolver import ContractResolver
from tests.test_helpers.models import Book, Employee

WORKERS = 8
BUILD_DELAY_SECONDS = 0.05
JOIN_TIMEOUT_SECONDS = 2.0


def test_concurrent_first_resolution_builds_once() -> None:
    """Racing callers share one build and receive the same contract."""
    builds: list[type] = []
    lock = threading.Lock()

    def slow(resolution_type: type, members: Sequence[ResolvedMember]) -> Sequence[ResolvedMember]:
        with lock:
            builds.append(resolution_type)
        time.sleep(BUILD_DELAY_SECONDS)
        return members

    resolver = ContractResolver(ResolverConfig(transform_members=slow))
    barrier = threading.Barrier(WORKERS)

    def resolve() -> Contract:
        barrier.wait()
        return resolver.resolve(Book)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(lambda _: resolve(), range(WORKERS)))
    assert builds == [Book]
    assert all(result is results[0] for result in results)
    stats = resolver.cache_stats()
    assert stats.builds == 1
    assert stats.hits == WORKERS - 1


def test_resolvers_do_not_share_contracts() -> None:
    """Differently configured resolvers keep their own results."""
    authors = ContractResolver(ResolverConfig(transform_members=name_prefix_filter("A")))
    books = ContractResolver(ResolverConfig(transform_members=name_prefix_filter("B")))

    def resolve(index: int) -> tuple[str, ...]:
        target = authors if index % 2 == 0 else books
        return target.resolve(Book).public_names

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(resolve, range(WORKERS * 4)))
    for index, names in enumerate(results):
        expected_prefix = "Author" if index % 2 == 0 else "Book"
        assert all(name.startswith(expected_prefix) for name in names)
    assert authors.resolve(Book).public_names == ("AuthorName", "AuthorAge", "AuthorCountry")
    assert books.resolve(Book).public_names == ("BookName", "BookPrice")


def test_cache_keys_by_requested_type() -> None:
    """Each requested class gets its own entry."""
    resolver = ContractResolver()
    resolver.resolve_many([Book, Employee, Book])
    stats = resolver.cache_stats()
    assert stats.entries == 2
    assert stats.misses == 2
    assert stats.hits == 1


def test_failed_build_publishes_nothing() -> None:
    """A failing builder leaves the cache untouched and can be retried."""
    cache = ContractCache()

    def failing() -> Contract:
        msg = "boom"
        raise RuntimeError(msg)

    with pytest.raises(RuntimeError, match="boom"):
        cache.get_or_build(Book, failing)
    assert Book not in cache
    assert cache.get(Book) is None
    contract = cache.get_or_build(Book, lambda: build_contract(Book, []))
    assert cache.get(Book) is contract
    assert cache.stats() == ContractCacheStats(entries=1, misses=2, builds=1, failures=1)


def test_clear_resets_entries_and_counters() -> None:
    """Clearing drops contracts and counters."""
    cache = ContractCache()
    cache.get_or_build(Book, lambda: build_contract(Book, []))
    cache.get_or_build(Book, lambda: build_contract(Book, []))
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0
    assert cache.stats() == ContractCacheStats()


def test_cached_reads_do_not_take_the_cache_lock() -> None:
    """Published contracts are returned while the cache-wide lock is held."""
    resolver = ContractResolver()
    contract = resolver.resolve(Book)
    results: list[Contract] = []
    reader = threading.Thread(target=lambda: results.append(resolver.resolve(Book)))
    with resolver._cache._lock:
        reader.start()
        reader.join(timeout=JOIN_TIMEOUT_SECONDS)
        finished = not reader.is_alive()
    reader.join()
    assert finished
    assert results == [contract]
    assert resolver.cache_stats().hits == 1


def test_hits_counted_across_threads() -> None:
    """Hits from several threads add up in the stats snapshot."""
    resolver = ContractResolver()
    resolver.resolve(Book)
    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(lambda _: resolver.resolve(Book), range(WORKERS * 2)))
    assert resolver.cache_stats().hits == WORKERS * 2


def test_key_lock_released_after_failed_build() -> None:
    """Repeatedly failing keys do not leave build locks behind."""
    cache = ContractCache()

    def failing() -> Contract:
        msg = "still broken"
        raise LookupError(msg)

    for _ in range(3):
        with pytest.raises(LookupError):
            cache.get_or_build(Book, failing)
    assert cache._key_locks == {}
    cache.get_or_build(Employee, lambda: build_contract(Employee, []))
    assert cache._key_locks == {}
