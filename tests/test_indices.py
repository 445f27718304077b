"""
Index-sanity verifier: index tokens, distance, offset and successor must agree.
"""

from __future__ import annotations

from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from relcheck.datasets.specimens import (
    FlattenedCollection,
    LopsidedCollection,
    MiscountedCollection,
    SegmentIndex,
    SkewedFlattenedCollection,
    StutteringCollection,
    segment_values,
)
from relcheck.validate import (
    SequenceCollection,
    ViolationError,
    ViolationKind,
    ViolationRecorder,
    assert_collection_index_sanity,
    confirm_collection_index_sanity,
)


# ------------------------- reference collections ------------------------- #

@pytest.mark.parametrize(
    "subject",
    [
        range(10),
        [],
        list("abcdef"),
        SequenceCollection(list(range(5)), origin=1000),
        FlattenedCollection(segment_values(list(range(10)))),
        FlattenedCollection([[], [], []]),
        FlattenedCollection([[1, 2, 3]]),
    ],
    ids=repr,
)
def test_reference_collections_pass(subject) -> None:
    assert confirm_collection_index_sanity(subject)
    assert_collection_index_sanity(subject)


def test_flattened_offsets_and_distances() -> None:
    collection = FlattenedCollection([[], ["a", "b"], [], ["c"], []])
    start = collection.start_index
    assert start == SegmentIndex(1, 0)
    assert collection.end_index == SegmentIndex(5, 0)
    assert collection.index_offset(start, 2) == SegmentIndex(3, 0)
    assert collection.index_offset(start, 3) == collection.end_index
    assert collection.index_offset(collection.end_index, -3) == start
    assert collection.distance(collection.end_index, start) == -3
    assert list(collection.indices()) == [SegmentIndex(1, 0), SegmentIndex(1, 1), SegmentIndex(3, 0)]
    with pytest.raises(IndexError):
        collection.index_offset(start, 4)
    with pytest.raises(IndexError):
        collection.index_after(collection.end_index)


# ------------------------- broken collections ------------------------- #

def test_skewed_offset_fails_round_trip() -> None:
    collection = SkewedFlattenedCollection(segment_values(list(range(10))))
    assert not confirm_collection_index_sanity(collection)

    found = assert_collection_index_sanity(collection, recorder=ViolationRecorder())
    assert found
    assert {v.relation for v in found} == {
        "index_offset(start_index, distance(start_index, index)) == index"
    }
    # position 6 (value 6) sits right after an empty segment
    assert 6 in {v.positions[0] for v in found}


def test_skewed_offset_is_invisible_without_empty_segments() -> None:
    collection = SkewedFlattenedCollection([[1, 2], [3], [4, 5, 6]])
    assert confirm_collection_index_sanity(collection)


def test_lopsided_distance_fails_symmetry_only() -> None:
    collection = LopsidedCollection(list(range(6)))
    found = assert_collection_index_sanity(collection, recorder=ViolationRecorder())
    relations = {v.relation for v in found}
    assert relations == {"distance(a, b) == -distance(b, a)"}
    # one violation per unordered pair
    assert len(found) == 6 * 5 // 2


def test_stuttering_distance_fails_linearity_only() -> None:
    collection = StutteringCollection(list(range(6)))
    found = assert_collection_index_sanity(collection, recorder=ViolationRecorder())
    assert {v.relation for v in found} == {"distance(a, b) == position(b) - position(a)"}
    # every pair at least two steps apart
    assert len(found) == 6 * 5 // 2 - 5
    assert all(v.positions[1] - v.positions[0] >= 2 for v in found)
    assert all(v.observed == v.expected + 1 for v in found)
    assert not confirm_collection_index_sanity(collection)


def test_stuttering_distance_is_invisible_below_two_elements() -> None:
    assert confirm_collection_index_sanity(StutteringCollection([]))
    assert confirm_collection_index_sanity(StutteringCollection(["a"]))
    assert confirm_collection_index_sanity(StutteringCollection(["a", "b"]))


def test_miscounted_collection_fails_cardinality() -> None:
    with pytest.raises(ViolationError) as excinfo:
        assert_collection_index_sanity(MiscountedCollection([1, 2]))
    assert [v.kind for v in excinfo.value.violations] == [ViolationKind.CARDINALITY]


class _DescendingTokens(SequenceCollection):
    """Index tokens whose ordering runs backwards relative to iteration."""

    @property
    def start_index(self) -> int:
        return 0

    @property
    def end_index(self) -> int:
        return -len(self._base)

    def index_after(self, index: int) -> int:
        return index - 1

    def index_offset(self, index: int, distance: int) -> int:
        return index - distance

    def distance(self, start: int, end: int) -> int:
        return start - end

    def __getitem__(self, index: int):
        return self._base[-index]


def test_token_ordering_that_disagrees_with_iteration_is_caught() -> None:
    collection = _DescendingTokens(list("abcd"))
    found = assert_collection_index_sanity(collection, recorder=ViolationRecorder())
    relations = {v.relation for v in found}
    assert "start_index <= end_index" in relations
    assert "a < b" in relations
    assert "index < end_index" in relations
    # arithmetic is self-consistent; only the token operators disagree
    assert "distance(a, b) == -distance(b, a)" not in relations
    assert any(v.detail == "subject: index" for v in found)
    token_findings = [v for v in found if v.detail == "subject: index"]
    assert {v.kind for v in token_findings} == {ViolationKind.INDEX_ARITHMETIC}


class _NonUnitSuccessor(SequenceCollection):
    def index_after(self, index: int) -> int:
        return min(index + 2, self.end_index)


def test_non_unit_successor_is_caught() -> None:
    collection = _NonUnitSuccessor(list(range(6)))
    found = assert_collection_index_sanity(collection, recorder=ViolationRecorder())
    assert "distance(index, index_after(index)) == 1" in {v.relation for v in found}
    assert not confirm_collection_index_sanity(collection)


def test_halting_recorder_stops_at_first_violation() -> None:
    recorder = ViolationRecorder(halt_on_first_failure=True)
    with pytest.raises(ViolationError):
        assert_collection_index_sanity(LopsidedCollection(list(range(6))), recorder=recorder)
    assert len(recorder) == 1


# ------------------------- property-based tests ------------------------- #

segment_patterns = st.lists(st.integers(min_value=0, max_value=3), min_size=1, max_size=5).filter(any)


@settings(deadline=None, max_examples=40)
@given(st.lists(st.integers(), max_size=16), segment_patterns)
def test_property_flattened_round_trip_and_linearity(values: List[int], pattern: List[int]) -> None:
    collection = FlattenedCollection(segment_values(values, pattern))
    start = collection.start_index
    indices = list(collection.indices())
    for p, idx in enumerate(indices):
        assert collection.index_offset(start, collection.distance(start, idx)) == idx
        for q in range(p, len(indices)):
            other = indices[q]
            assert collection.distance(idx, other) == q - p
            assert collection.distance(idx, other) == -collection.distance(other, idx)
    assert confirm_collection_index_sanity(collection)


@settings(deadline=None, max_examples=40)
@given(st.integers(min_value=0, max_value=30), st.integers(min_value=-50, max_value=50))
def test_property_shifted_sequences_pass(n: int, origin: int) -> None:
    assert confirm_collection_index_sanity(SequenceCollection(list(range(n)), origin=origin))
