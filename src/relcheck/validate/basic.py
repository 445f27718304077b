"""
Basic collection sanity: cheap agreement checks between aggregate properties.

Clauses (each reported independently):
1. ``count >= 0``
2. ``is_empty <=> count == 0``
3. ``is_empty <=> start_index == end_index``
4. ``count == distance(start_index, end_index)``
5. ``first is MISSING <=> is_empty``
6. ``count == count_by_iterating(collection)``

*Not* very comprehensive, but useful as a first pass before the far more
expensive index-sanity check.

Public API (stable):
    assert_collection_basic_sanity(collection, *, recorder=None) -> list[Violation]
    confirm_collection_basic_sanity(collection) -> bool
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional

from .collection import MISSING, as_indexed_collection, count_by_iterating
from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = ["assert_collection_basic_sanity", "confirm_collection_basic_sanity"]


def _iter_basic_violations(collection: Any) -> Iterator[Violation]:
    count = collection.count
    is_empty = bool(collection.is_empty)
    start, end = collection.start_index, collection.end_index

    if not count >= 0:
        yield Violation(ViolationKind.CARDINALITY, "count >= 0", True, False, operands=(count,))

    if is_empty != (count == 0):
        yield Violation(
            ViolationKind.EMPTINESS,
            "is_empty == (count == 0)",
            count == 0,
            is_empty,
            operands=(count,),
        )

    bounds_equal = bool(start == end)
    if is_empty != bounds_equal:
        yield Violation(
            ViolationKind.EMPTINESS,
            "is_empty == (start_index == end_index)",
            bounds_equal,
            is_empty,
            operands=(start, end),
        )

    span = collection.distance(start, end)
    if count != span:
        yield Violation(
            ViolationKind.CARDINALITY,
            "count == distance(start_index, end_index)",
            span,
            count,
            operands=(start, end),
        )

    first = collection.first
    first_missing = first is MISSING
    if first_missing != is_empty:
        yield Violation(
            ViolationKind.EMPTINESS,
            "(first is MISSING) == is_empty",
            is_empty,
            first_missing,
            operands=(first,),
        )

    iterated = count_by_iterating(collection)
    if count != iterated:
        yield Violation(
            ViolationKind.CARDINALITY,
            "count == count_by_iterating(collection)",
            iterated,
            count,
        )


def assert_collection_basic_sanity(
    collection: Any, *, recorder: Optional[ViolationRecorder] = None
) -> List[Violation]:
    """
    Record every violated basic-sanity clause for `collection`.

    `collection` may be an `IndexedCollection`, a Python sequence, or any
    finite iterable (the latter two are adapted with `as_indexed_collection`).
    """
    return run_assertion(_iter_basic_violations(as_indexed_collection(collection)), recorder)


def confirm_collection_basic_sanity(collection: Any) -> bool:
    """Return True iff every basic-sanity clause holds."""
    return run_confirmation(_iter_basic_violations(as_indexed_collection(collection)))
