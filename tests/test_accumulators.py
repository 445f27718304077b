"""
Lock-guarded accumulators under concurrent updates.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from relcheck.bench.accumulators import SynchronizedCounter, SynchronizedIndexSet
from relcheck.validate import confirm_coherent_ordering


def test_counter_survives_concurrent_increments() -> None:
    counter = SynchronizedCounter.for_current_function()
    assert counter.identifier == "test_counter_survives_concurrent_increments"

    def work(_: int) -> None:
        for _ in range(1000):
            counter.increment()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(work, range(8)))
    assert counter.current_count == 8000


def test_counter_only_increases() -> None:
    counter = SynchronizedCounter("c")
    counter.increment(by=5)
    assert counter.current_count == 5
    with pytest.raises(ValueError):
        counter.increment(by=-1)
    assert repr(counter) == 'SynchronizedCounter(identifier="c")'


def test_index_set_collects_concurrent_insertions() -> None:
    failures = SynchronizedIndexSet.for_current_function()
    assert failures.is_empty and not failures.is_non_empty

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda i: failures.insert(i) if i % 3 == 0 else None, range(300)))

    assert failures.current_count == 100
    assert failures.current_indices == frozenset(range(0, 300, 3))
    assert failures.is_non_empty


def test_index_set_bulk_insertion() -> None:
    indices = SynchronizedIndexSet("bulk")
    indices.insert_range(range(0))
    indices.union([])
    assert indices.is_empty
    indices.insert_range(range(5, 10))
    indices.union([1, 7, 20])
    assert indices.current_indices == frozenset({1, 5, 6, 7, 8, 9, 20})


def test_sharded_verification_tally() -> None:
    # shard independent fixtures across threads; tally which ones fail
    fixtures = [list(range(n)) if n % 2 else list(range(n, 0, -1)) for n in range(2, 12)]
    passed = SynchronizedCounter("passed")
    failed = SynchronizedIndexSet("failed")

    def check(item) -> None:
        trial, values = item
        if confirm_coherent_ordering(values):
            passed.increment()
        else:
            failed.insert(trial)

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(check, enumerate(fixtures)))

    assert passed.current_count == 5
    assert failed.current_indices == frozenset(range(0, 10, 2))
