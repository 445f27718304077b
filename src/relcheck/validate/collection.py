"""
The capability contract shared by the collection verifiers.

An `IndexedCollection` locates its elements through opaque index tokens. The
verifiers only ever compare tokens (``==``, ``<``, ...) and hand them back to
the collection's own navigation methods; they never look inside a token.

Public API (stable):
    MISSING                       # `first` of an empty collection
    IndexedCollection             # typing.Protocol
    SequenceCollection            # adapter for any Python Sequence
    as_indexed_collection(obj) -> IndexedCollection
    count_by_iterating(iterable) -> int
"""

from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any, Iterable, Iterator, Protocol, Sequence, runtime_checkable

__all__ = [
    "MISSING",
    "IndexedCollection",
    "SequenceCollection",
    "as_indexed_collection",
    "count_by_iterating",
]


class _Missing:
    """Sentinel type for `MISSING`."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@runtime_checkable
class IndexedCollection(Protocol):
    """
    Minimal capability set for the basic-sanity and index-sanity verifiers.

    `indices()` yields every *subscriptable* index in iteration order (so
    never `end_index`). `distance(a, b)` is signed: negative when `b` comes
    before `a`. `index_offset(i, d)` may be asked for any `d` that lands
    within ``[start_index, end_index]``. `first` is `MISSING` when the
    collection is empty; `None` is an ordinary element.
    """

    @property
    def start_index(self) -> Any: ...

    @property
    def end_index(self) -> Any: ...

    @property
    def count(self) -> int: ...

    @property
    def is_empty(self) -> bool: ...

    @property
    def first(self) -> Any: ...

    def indices(self) -> Iterable[Any]: ...

    def index_after(self, index: Any) -> Any: ...

    def index_offset(self, index: Any, distance: int) -> Any: ...

    def distance(self, start: Any, end: Any) -> int: ...

    def __getitem__(self, index: Any) -> Any: ...

    def __iter__(self) -> Iterator[Any]: ...


class SequenceCollection:
    """
    Expose a Python `Sequence` through the `IndexedCollection` contract.

    Index tokens are plain integers shifted by `origin`, so token ``origin``
    addresses ``base[0]``. With a non-zero origin, code that confuses tokens
    with positions is caught by the index verifier.
    """

    def __init__(self, base: Sequence[Any], *, origin: int = 0) -> None:
        self._base = base
        self._origin = origin

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._base)!r}, origin={self._origin})"

    # ---- bounds ---- #

    @property
    def start_index(self) -> int:
        return self._origin

    @property
    def end_index(self) -> int:
        return self._origin + len(self._base)

    @property
    def count(self) -> int:
        return len(self._base)

    @property
    def is_empty(self) -> bool:
        return self.start_index == self.end_index

    @property
    def first(self) -> Any:
        return self[self.start_index] if not self.is_empty else MISSING

    def __len__(self) -> int:
        return self.count

    # ---- navigation ---- #

    def _require_reachable(self, index: int) -> None:
        if not self.start_index <= index <= self.end_index:
            raise IndexError(
                f"index {index} outside [{self.start_index}, {self.end_index}]"
            )

    def index_after(self, index: int) -> int:
        if index >= self.end_index:
            raise IndexError(f"cannot advance past end_index {self.end_index}")
        return index + 1

    def index_offset(self, index: int, distance: int) -> int:
        self._require_reachable(index)
        result = index + distance
        self._require_reachable(result)
        return result

    def distance(self, start: int, end: int) -> int:
        self._require_reachable(start)
        self._require_reachable(end)
        return end - start

    def indices(self) -> Iterator[int]:
        i = self.start_index
        while i != self.end_index:
            yield i
            i = self.index_after(i)

    def __getitem__(self, index: int) -> Any:
        if not self.start_index <= index < self.end_index:
            raise IndexError(f"index {index} is not subscriptable")
        return self._base[index - self._origin]

    def __iter__(self) -> Iterator[Any]:
        for i in self.indices():
            yield self[i]


def as_indexed_collection(obj: Any) -> Any:
    """
    Return `obj` unchanged if it already satisfies `IndexedCollection`;
    otherwise wrap it in a `SequenceCollection` (materializing one-shot
    iterables such as ``reversed(range(10))`` first).
    """
    if isinstance(obj, IndexedCollection):
        return obj
    if isinstance(obj, _SequenceABC):
        return SequenceCollection(obj)
    return SequenceCollection(list(obj))


def count_by_iterating(iterable: Iterable[Any]) -> int:
    """
    Count elements by iterating start to finish.

    Collections with complex iteration but easily-calculated counts tend to
    get the count right and the iteration wrong.
    """
    count = 0
    for _ in iterable:
        count += 1
    return count
