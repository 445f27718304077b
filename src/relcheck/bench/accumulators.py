"""
Lock-guarded, monotonic accumulators for sharded verification runs.

Motivating use case: run an exhaustive check over many fixtures in parallel,
record which trials failed, then report everything at once. Both types only
ever *grow*, so reading them mid-run is racy but never goes backwards; the
intended lifecycle is

    1. create
    2. concurrent, write-only updates
    3. serial, read-only verification

Public API (stable):
    SynchronizedCounter(identifier)
    SynchronizedIndexSet(identifier)
"""

from __future__ import annotations

import inspect
import threading
from typing import FrozenSet, Iterable

__all__ = ["SynchronizedCounter", "SynchronizedIndexSet"]


def _caller_name(depth: int = 2) -> str:
    frame = inspect.stack()[depth]
    return frame.function


class SynchronizedCounter:
    """A counter whose `increment` may be called from any thread."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        self._count = 0
        self._lock = threading.Lock()

    @classmethod
    def for_current_function(cls) -> "SynchronizedCounter":
        """A counter named after the calling function (enough for most tests)."""
        return cls(_caller_name())

    def __repr__(self) -> str:
        return f'SynchronizedCounter(identifier="{self.identifier}")'

    def increment(self, by: int = 1) -> None:
        if by < 0:
            raise ValueError(f"counter only increases; got increment {by}")
        with self._lock:
            self._count += by

    @property
    def current_count(self) -> int:
        with self._lock:
            return self._count


class SynchronizedIndexSet:
    """A set of non-negative ints supporting concurrent insertion only."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        self._indices: set = set()
        self._lock = threading.Lock()

    @classmethod
    def for_current_function(cls) -> "SynchronizedIndexSet":
        """An index set named after the calling function."""
        return cls(_caller_name())

    def __repr__(self) -> str:
        return f'SynchronizedIndexSet(identifier="{self.identifier}")'

    def insert(self, index: int) -> None:
        with self._lock:
            self._indices.add(index)

    def insert_range(self, indices: range) -> None:
        if not indices:
            return
        with self._lock:
            self._indices.update(indices)

    def union(self, indices: Iterable[int]) -> None:
        pending = list(indices)
        if not pending:
            return
        with self._lock:
            self._indices.update(pending)

    @property
    def current_indices(self) -> FrozenSet[int]:
        with self._lock:
            return frozenset(self._indices)

    @property
    def current_count(self) -> int:
        with self._lock:
            return len(self._indices)

    @property
    def is_empty(self) -> bool:
        # starts True and may flip to False; never back
        with self._lock:
            return not self._indices

    @property
    def is_non_empty(self) -> bool:
        return not self.is_empty
