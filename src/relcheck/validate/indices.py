"""
Index sanity: exhaustive agreement between a collection's index arithmetic
and its index tokens' own comparison operators.

The ordering-and-comparison logic ends up duplicated between a collection
and its indices. The index type has its own ``==`` and ``<``; meanwhile
`distance`, `index_after` and `index_offset` imply another set of equality
and ordering relationships. Both must agree: if ``a < b`` then
``distance(a, b) > 0`` and some number of `index_after` steps sends `a` to
`b`; if ``distance(a, b) == d`` then ``index_offset(a, d) == b``.

In practice these drift apart when indices carry internal structure and the
navigation methods are implemented along different lines (e.g. a stepping
`index_after` next to a chunk-jumping `index_offset`). Such bugs are hard to
find without exhaustive testing.

Checks, in order:
1. ``start_index <= end_index``
2. ``is_empty`` and ``count`` agree with the materialized `indices()`
3. the indices themselves pass the ordering-coherence check (reported as
   index-arithmetic violations)
4. every index is subscriptable: ``start_index <= index < end_index``
5. ``index_offset(start_index, distance(start_index, index)) == index``
6. ``distance(index, index_after(index)) == 1``
7. for every later index: ``distance(a, b) == -distance(b, a)`` and
   ``distance(a, b)`` equals the difference in positions

Public API (stable):
    assert_collection_index_sanity(collection, *, recorder=None) -> list[Violation]
    confirm_collection_index_sanity(collection) -> bool

Warning
-------
At least O(n^2) calls into the collection, each of which may itself be O(n):
call this on the smallest collections that still exercise your index type.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterator, List, Optional

from .collection import as_indexed_collection
from .ordering import _iter_ordering_violations
from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = ["assert_collection_index_sanity", "confirm_collection_index_sanity"]

_ARITH = ViolationKind.INDEX_ARITHMETIC


def _iter_index_violations(collection: Any) -> Iterator[Violation]:
    start, end = collection.start_index, collection.end_index

    # start/end ordering
    if not bool(start <= end):
        yield Violation(_ARITH, "start_index <= end_index", True, False, operands=(start, end))

    index_list = list(collection.indices())

    # emptiness & count against the index set
    if bool(collection.is_empty) != (not index_list):
        yield Violation(
            ViolationKind.EMPTINESS,
            "is_empty == (not indices())",
            not index_list,
            bool(collection.is_empty),
        )
    if collection.count != len(index_list):
        yield Violation(
            ViolationKind.CARDINALITY,
            "count == len(indices())",
            len(index_list),
            collection.count,
        )

    # the index tokens must be distinct and ascending under their own operators
    for violation in _iter_ordering_violations(index_list, subject="index"):
        yield replace(violation, kind=_ARITH)

    for l_pos, l_idx in enumerate(index_list):
        # subscriptability
        if not bool(l_idx >= start):
            yield Violation(
                _ARITH, "start_index <= index", True, False,
                positions=(l_pos,), operands=(start, l_idx),
                detail="indices() yielded a non-subscriptable index",
            )
        if not bool(l_idx < end):
            yield Violation(
                _ARITH, "index < end_index", True, False,
                positions=(l_pos,), operands=(l_idx, end),
                detail="indices() yielded a non-subscriptable index",
            )

        # round-trip via distance-from-start
        from_start = collection.distance(start, l_idx)
        arrived = collection.index_offset(start, from_start)
        if not bool(arrived == l_idx):
            yield Violation(
                _ARITH,
                "index_offset(start_index, distance(start_index, index)) == index",
                l_idx,
                arrived,
                positions=(l_pos,),
                operands=(l_idx,),
                detail=f"distance from start was {from_start}",
            )

        # unit step
        successor = collection.index_after(l_idx)
        step = collection.distance(l_idx, successor)
        if step != 1:
            yield Violation(
                _ARITH,
                "distance(index, index_after(index)) == 1",
                1,
                step,
                positions=(l_pos,),
                operands=(l_idx, successor),
            )

        # pairwise symmetry & magnitude over the tail
        for r_pos in range(l_pos + 1, len(index_list)):
            r_idx = index_list[r_pos]
            where = dict(positions=(l_pos, r_pos), operands=(l_idx, r_idx))
            forward = collection.distance(l_idx, r_idx)
            backward = collection.distance(r_idx, l_idx)
            if forward != -backward:
                yield Violation(
                    _ARITH, "distance(a, b) == -distance(b, a)", -backward, forward, **where
                )
            if forward != r_pos - l_pos:
                yield Violation(
                    _ARITH, "distance(a, b) == position(b) - position(a)",
                    r_pos - l_pos, forward, **where
                )


def assert_collection_index_sanity(
    collection: Any, *, recorder: Optional[ViolationRecorder] = None
) -> List[Violation]:
    """
    Exhaustively record every index-arithmetic incoherence in `collection`.

    Parameters
    ----------
    collection : IndexedCollection | Sequence | iterable
        The collection under test; sequences and other finite iterables are
        adapted with `as_indexed_collection`.
    recorder : ViolationRecorder, optional
        Sink for violations. If omitted, `ViolationError` is raised when any
        violation is found.

    Errors raised by the collection's own navigation methods propagate.
    """
    return run_assertion(_iter_index_violations(as_indexed_collection(collection)), recorder)


def confirm_collection_index_sanity(collection: Any) -> bool:
    """Return True iff no index-arithmetic incoherence is found."""
    return run_confirmation(_iter_index_violations(as_indexed_collection(collection)))
