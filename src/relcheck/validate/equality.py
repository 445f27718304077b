"""
Equality coherence: do `==` and `!=` agree with positional identity?

For `values` a sequence whose elements *should be* pairwise-distinct, every
pair of positions (i, j) with j <= i is checked for:

1. ``a == b`` iff i == j
2. ``a != b`` iff i != j
3. ``(a == b) == (b == a)``            (symmetry)
4. ``(a == b) == (not (a != b))``      (`__ne__` is a separate hook in Python)

Public API (stable):
    assert_coherent_equality(values, *, key=None, recorder=None) -> list[Violation]
    confirm_coherent_equality(values, *, key=None) -> bool

Notes
-----
- Positions come from iterating `values` once; any finite iterable is accepted.
- The fixture is trusted unless `key` is given, in which case a repeated key
  raises `FixtureError` before any value is compared.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence

from .properties import require_distinct_keys
from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = ["assert_coherent_equality", "confirm_coherent_equality"]

_EQ = ViolationKind.EQUALITY


def _prepare(values: Iterable[Any], key: Optional[Callable[[Any], Any]]) -> List[Any]:
    materialized = list(values)
    if key is not None:
        require_distinct_keys(materialized, key)
    return materialized


def _iter_equality_violations(values: Sequence[Any]) -> Iterator[Violation]:
    # triangular: r_pos <= l_pos; symmetry is checked explicitly per pair
    for l_pos, l_val in enumerate(values):
        for r_pos in range(l_pos + 1):
            r_val = values[r_pos]
            where = dict(positions=(l_pos, r_pos), operands=(l_val, r_val))

            eq = bool(l_val == r_val)
            if eq != (l_pos == r_pos):
                yield Violation(_EQ, "a == b", l_pos == r_pos, eq, **where)

            ne = bool(l_val != r_val)
            if ne != (l_pos != r_pos):
                yield Violation(_EQ, "a != b", l_pos != r_pos, ne, **where)

            if eq == ne:
                yield Violation(
                    _EQ, "(a == b) == (not (a != b))", eq, not ne, **where
                )

            flipped = bool(r_val == l_val)
            if eq != flipped:
                yield Violation(
                    _EQ,
                    "(a == b) == (b == a)",
                    eq,
                    flipped,
                    detail="asymmetric ==",
                    **where,
                )


def assert_coherent_equality(
    values: Iterable[Any],
    *,
    key: Optional[Callable[[Any], Any]] = None,
    recorder: Optional[ViolationRecorder] = None,
) -> List[Violation]:
    """
    Record every `==`/`!=` incoherence found in `values`.

    Parameters
    ----------
    values : iterable
        Elements presumed pairwise-distinct, in ground-truth order.
    key : callable, optional
        Trusted projection used to validate the fixture first.
    recorder : ViolationRecorder, optional
        Sink for violations. If omitted, `ViolationError` is raised when any
        violation is found.

    Returns
    -------
    list[Violation]
        The violations found by this call.
    """
    return run_assertion(_iter_equality_violations(_prepare(values, key)), recorder)


def confirm_coherent_equality(
    values: Iterable[Any], *, key: Optional[Callable[[Any], Any]] = None
) -> bool:
    """Return True iff no `==`/`!=` incoherence is found; stops at the first."""
    return run_confirmation(_iter_equality_violations(_prepare(values, key)))
