"""
Ordering-coherence verifier against reference and deliberately-broken types.

What we check:
- Ascending distinct fixtures pass for correct operators
- Every broken type fails (ordering involves `==` *and* `<`, etc.)
- Descending or repeated fixtures fail even for correct operators, because
  the ascending-distinct precondition is violated
- The clauses that fail point at the operator that drifted
"""

from __future__ import annotations

from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from relcheck.datasets.specimens import (
    BrokenComparisonInteger,
    BrokenEqualityInteger,
    BrokenInteger,
)
from relcheck.validate import (
    FixtureError,
    ViolationKind,
    ViolationRecorder,
    assert_coherent_ordering,
    confirm_coherent_equality,
    confirm_coherent_ordering,
)

BROKEN_TYPES = [BrokenEqualityInteger, BrokenComparisonInteger, BrokenInteger]


# ------------------------- unit tests (deterministic) ------------------------- #

def test_uniform_fixture_fails_for_every_type(count: int) -> None:
    integers = [count] * count
    assert not confirm_coherent_ordering(integers)
    for broken in BROKEN_TYPES:
        assert not confirm_coherent_ordering([broken(v) for v in integers])


def test_ascending_fixture(count: int) -> None:
    integers = range(count)
    # reference is coherent
    assert confirm_coherent_ordering(integers)
    assert_coherent_ordering(integers)
    # none of the broken types should pass
    for broken in BROKEN_TYPES:
        assert not confirm_coherent_ordering([broken(v) for v in integers]), broken.__name__


def test_descending_fixture_fails_even_for_correct_operators(count: int) -> None:
    # the reference needs to be ascending, ergo everything should fail
    integers = reversed(range(count))
    assert not confirm_coherent_ordering(integers)
    for broken in BROKEN_TYPES:
        assert not confirm_coherent_ordering([broken(v) for v in reversed(range(count))])


def test_broken_equality_fails_on_equality_clauses() -> None:
    values = [BrokenEqualityInteger(v) for v in range(10)]
    recorder = ViolationRecorder()
    found = assert_coherent_ordering(values, recorder=recorder)
    kinds = {v.kind for v in found}
    assert ViolationKind.EQUALITY in kinds
    # comparison operators are correct and coherent with one another
    assert ViolationKind.ORDERING not in kinds


def test_broken_comparison_fails_on_coherence_clauses() -> None:
    values = [BrokenComparisonInteger(v) for v in range(10)]
    assert confirm_coherent_equality(values)
    assert not confirm_coherent_ordering(values)

    found = assert_coherent_ordering(values, recorder=ViolationRecorder())
    relations = {v.relation for v in found}
    assert "(a <= b) == (not (a > b))" in relations
    assert "a <= b" in relations
    assert "a < b" not in relations
    assert all(v.kind is ViolationKind.ORDERING for v in found)


def test_reversed_pair_is_checked_in_both_orientations() -> None:
    found = assert_coherent_ordering([1, 0], recorder=ViolationRecorder())
    positions = {v.positions for v in found}
    assert positions == {(0, 1), (1, 0)}


def test_key_reports_fixture_defect_instead_of_type_defect() -> None:
    with pytest.raises(FixtureError, match="position 0"):
        confirm_coherent_ordering([3, 2, 1], key=lambda v: v)
    with pytest.raises(FixtureError):
        assert_coherent_ordering([BrokenInteger(v) for v in (0, 1, 1)], key=lambda v: v.value)
    assert confirm_coherent_ordering(["a", "b", "c"], key=str)


def test_empty_and_singleton() -> None:
    assert confirm_coherent_ordering([])
    assert confirm_coherent_ordering([42])
    assert not confirm_coherent_ordering([BrokenComparisonInteger(42)])


# ------------------------- property-based tests ------------------------- #

@settings(deadline=None, max_examples=60)
@given(st.lists(st.integers(min_value=-10_000, max_value=10_000), unique=True, max_size=25))
def test_property_sorted_distinct_integers_are_coherent(values: List[int]) -> None:
    assert confirm_coherent_ordering(sorted(values))


@settings(deadline=None, max_examples=60)
@given(st.lists(st.integers(min_value=-50, max_value=50), min_size=2, max_size=15))
def test_property_confirmation_matches_strict_ascent(values: List[int]) -> None:
    strictly_ascending = all(a < b for a, b in zip(values, values[1:]))
    assert confirm_coherent_ordering(values) == strictly_ascending
