"""
Ordering coherence: do all six comparison operators agree with position?

For `values` a sequence of *distinct* values in *ascending* order, every
ordered pair of positions (i, j) -- both orientations, including i == j -- is
checked for:

1. ``==`` / ``!=`` agree with i == j / i != j, and with each other
2. ``<``, ``<=``, ``>``, ``>=`` agree with the same relation on (i, j)
3. ``(a < b) == not (a >= b)``, ``(a <= b) == not (a > b)``,
   ``(a > b) == not (a <= b)``, ``(a >= b) == not (a < b)``

(3) is redundant when (1) and (2) hold, but pinpoints which operator drifted.

Iterating the full cross product (rather than the triangle used for
equality) keeps the clauses per pair small and uniform: the reversed
orientation is simply another pair.

Public API (stable):
    assert_coherent_ordering(values, *, key=None, recorder=None) -> list[Violation]
    confirm_coherent_ordering(values, *, key=None) -> bool
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence

from .properties import require_ascending_distinct_keys
from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = ["assert_coherent_ordering", "confirm_coherent_ordering"]

_COMPARISONS = (
    ("<", operator.lt),
    ("<=", operator.le),
    (">", operator.gt),
    (">=", operator.ge),
)

# (relation, its logical complement)
_COMPLEMENTS = (("<", ">="), ("<=", ">"), (">", "<="), (">=", "<"))


def _prepare(values: Iterable[Any], key: Optional[Callable[[Any], Any]]) -> List[Any]:
    materialized = list(values)
    if key is not None:
        require_ascending_distinct_keys(materialized, key)
    return materialized


def _iter_ordering_violations(
    values: Sequence[Any], subject: str = "value"
) -> Iterator[Violation]:
    detail = "" if subject == "value" else f"subject: {subject}"
    for l_pos, l_val in enumerate(values):
        for r_pos, r_val in enumerate(values):
            where = dict(positions=(l_pos, r_pos), operands=(l_val, r_val), detail=detail)

            # equality verification
            eq = bool(l_val == r_val)
            if eq != (l_pos == r_pos):
                yield Violation(ViolationKind.EQUALITY, "a == b", l_pos == r_pos, eq, **where)
            ne = bool(l_val != r_val)
            if ne != (l_pos != r_pos):
                yield Violation(ViolationKind.EQUALITY, "a != b", l_pos != r_pos, ne, **where)
            if eq == ne:
                yield Violation(
                    ViolationKind.EQUALITY, "(a == b) == (not (a != b))", eq, not ne, **where
                )

            # expected-ordering verification
            observed = {}
            for symbol, op in _COMPARISONS:
                expected = op(l_pos, r_pos)
                observed[symbol] = bool(op(l_val, r_val))
                if observed[symbol] != expected:
                    yield Violation(
                        ViolationKind.ORDERING, f"a {symbol} b", expected, observed[symbol], **where
                    )

            # ordering-coherence verification
            for symbol, complement in _COMPLEMENTS:
                if observed[symbol] == observed[complement]:
                    yield Violation(
                        ViolationKind.ORDERING,
                        f"(a {symbol} b) == (not (a {complement} b))",
                        observed[symbol],
                        not observed[complement],
                        **where,
                    )


def assert_coherent_ordering(
    values: Iterable[Any],
    *,
    key: Optional[Callable[[Any], Any]] = None,
    recorder: Optional[ViolationRecorder] = None,
) -> List[Violation]:
    """
    Record every comparison-operator incoherence found in `values`.

    Parameters
    ----------
    values : iterable
        Elements presumed distinct and ascending, in ground-truth order.
    key : callable, optional
        Trusted projection; if given, keys that are not strictly ascending
        raise `FixtureError` before the type under test is judged.
    recorder : ViolationRecorder, optional
        Sink for violations. If omitted, `ViolationError` is raised when any
        violation is found.
    """
    return run_assertion(_iter_ordering_violations(_prepare(values, key)), recorder)


def confirm_coherent_ordering(
    values: Iterable[Any], *, key: Optional[Callable[[Any], Any]] = None
) -> bool:
    """
    Return True iff `values` is distinct-and-ascending as far as its own
    operators can tell *and* no incoherence between ``==``, ``!=``, ``<``,
    ``<=``, ``>`` and ``>=`` was found.
    """
    return run_confirmation(_iter_ordering_violations(_prepare(values, key)))
