"""
Element-level assertions: pairwise distinctness and disjointness.

Public API (stable):
    assert_pairwise_distinct_elements(values, *, recorder=None) -> list[Violation]
    confirm_pairwise_distinct_elements(values) -> bool
    assert_disjoint_collections(a, b, *, recorder=None) -> list[Violation]
    confirm_disjoint_collections(a, b) -> bool

Notes
-----
- Hashable elements are checked through a set; unhashable ones fall back to
  the quadratic `==` scan. Both report the same violations.
- Useful for validating fixtures before handing them to the equality and
  ordering verifiers.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = [
    "assert_pairwise_distinct_elements",
    "confirm_pairwise_distinct_elements",
    "assert_disjoint_collections",
    "confirm_disjoint_collections",
]


def _all_hashable(values: Iterable[Any]) -> bool:
    try:
        for v in values:
            hash(v)
    except TypeError:
        return False
    return True


def _iter_repeats(values: Sequence[Any]) -> Iterator[Violation]:
    if _all_hashable(values):
        first_seen: Dict[Any, int] = {}
        for position, v in enumerate(values):
            if v in first_seen:
                yield _repeat(first_seen[v], position, values)
            else:
                first_seen[v] = position
        return
    for later, b in enumerate(values):
        for earlier in range(later):
            if values[earlier] == b:
                yield _repeat(earlier, later, values)
                break


def _repeat(earlier: int, later: int, values: Sequence[Any]) -> Violation:
    return Violation(
        ViolationKind.DISTINCTNESS,
        "a != b",
        True,
        False,
        positions=(earlier, later),
        operands=(values[earlier], values[later]),
        detail="repeated element",
    )


def _iter_common_elements(a: Sequence[Any], b: Sequence[Any]) -> Iterator[Violation]:
    if _all_hashable(a) and _all_hashable(b):
        members = set(a)
        for position, bb in enumerate(b):
            if bb in members:
                yield _common(bb, position)
        return
    for position, bb in enumerate(b):
        if any(aa == bb for aa in a):
            yield _common(bb, position)


def _common(element: Any, position: int) -> Violation:
    return Violation(
        ViolationKind.DISJOINTNESS,
        "element not in a",
        True,
        False,
        positions=(position,),
        operands=(element,),
        detail="common element (position is within b)",
    )


def assert_pairwise_distinct_elements(
    values: Iterable[Any], *, recorder: Optional[ViolationRecorder] = None
) -> List[Violation]:
    """Record one violation per element that repeats an earlier one."""
    return run_assertion(_iter_repeats(list(values)), recorder)


def confirm_pairwise_distinct_elements(values: Iterable[Any]) -> bool:
    """Return True iff there are no repeated elements in `values`."""
    return run_confirmation(_iter_repeats(list(values)))


def assert_disjoint_collections(
    a: Iterable[Any], b: Iterable[Any], *, recorder: Optional[ViolationRecorder] = None
) -> List[Violation]:
    """Record one violation per element of `b` that also occurs in `a`."""
    return run_assertion(_iter_common_elements(list(a), list(b)), recorder)


def confirm_disjoint_collections(a: Iterable[Any], b: Iterable[Any]) -> bool:
    """Return True iff `a` and `b` have no elements in common."""
    return run_confirmation(_iter_common_elements(list(a), list(b)))
