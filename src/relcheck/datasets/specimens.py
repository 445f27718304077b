"""
Specimens: deliberately-broken types, plus reference collections.

These exist to verify that the coherence verifiers catch broken types as
expected, and to give the sweep runner something to run them against.

Value specimens (constructed from an int):
    int                      the reference
    BrokenEqualityInteger    `==` computes `<`; comparisons are correct
    BrokenComparisonInteger  `==` is correct; `<=`, `>`, `>=` all compute `<`
    BrokenInteger            both of the above
    BrokenCodableInteger     serializes even values as 0

Collection specimens (constructed from a list of values):
    SequenceCollection           the reference (integer index tokens)
    FlattenedCollection          segments flattened into one collection;
                                 `SegmentIndex(segment, offset)` tokens
    SkewedFlattenedCollection    `index_offset` can land on an empty segment
    MiscountedCollection         `count` is one too high
    LopsidedCollection           backward distances overshoot by one
    StutteringCollection         distances between non-adjacent indices overshoot
                                 by one (in both directions)

Public API (stable):
    VALUE_SPECIMENS: dict[str, Callable[[int], Any]]
    COLLECTION_SPECIMENS: dict[str, Callable[[list], IndexedCollection]]
    segment_values(values, pattern=DEFAULT_SEGMENT_PATTERN) -> list[list]
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Sequence

from relcheck.validate.collection import MISSING, SequenceCollection

__all__ = [
    "BrokenEqualityInteger",
    "BrokenComparisonInteger",
    "BrokenInteger",
    "BrokenCodableInteger",
    "SegmentIndex",
    "FlattenedCollection",
    "SkewedFlattenedCollection",
    "MiscountedCollection",
    "LopsidedCollection",
    "StutteringCollection",
    "DEFAULT_SEGMENT_PATTERN",
    "segment_values",
    "VALUE_SPECIMENS",
    "COLLECTION_SPECIMENS",
]


# ------------------------- value specimens ------------------------- #


class _IntegerSpecimen:
    label = "specimen"

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"

    def __str__(self) -> str:
        return f"{self.label} {self.value}"


class BrokenEqualityInteger(_IntegerSpecimen):
    """`==` (and therefore `!=`) secretly computes `<`; comparisons are correct."""

    label = "broken-equality"
    __slots__ = ()

    def __eq__(self, other: "BrokenEqualityInteger") -> bool:
        return self.value < other.value

    def __lt__(self, other: "BrokenEqualityInteger") -> bool:
        return self.value < other.value

    def __le__(self, other: "BrokenEqualityInteger") -> bool:
        return self.value <= other.value

    def __gt__(self, other: "BrokenEqualityInteger") -> bool:
        return self.value > other.value

    def __ge__(self, other: "BrokenEqualityInteger") -> bool:
        return self.value >= other.value


class BrokenComparisonInteger(_IntegerSpecimen):
    """`==` is correct; every comparison operator secretly computes `<`."""

    label = "broken-comparison"
    __slots__ = ()

    def __eq__(self, other: "BrokenComparisonInteger") -> bool:
        return self.value == other.value

    def __lt__(self, other: "BrokenComparisonInteger") -> bool:
        return self.value < other.value

    def __le__(self, other: "BrokenComparisonInteger") -> bool:
        return self.value < other.value

    def __gt__(self, other: "BrokenComparisonInteger") -> bool:
        return self.value < other.value

    def __ge__(self, other: "BrokenComparisonInteger") -> bool:
        return self.value < other.value


class BrokenInteger(_IntegerSpecimen):
    """`==` computes `<`, and so does every comparison operator."""

    label = "broken"
    __slots__ = ()

    def __eq__(self, other: "BrokenInteger") -> bool:
        return self.value < other.value

    def __lt__(self, other: "BrokenInteger") -> bool:
        return self.value < other.value

    def __le__(self, other: "BrokenInteger") -> bool:
        return self.value < other.value

    def __gt__(self, other: "BrokenInteger") -> bool:
        return self.value < other.value

    def __ge__(self, other: "BrokenInteger") -> bool:
        return self.value < other.value


class BrokenCodableInteger(_IntegerSpecimen):
    """Correct equality, but `to_plain` encodes even values as 0."""

    label = "broken-codable"
    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BrokenCodableInteger) and self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def to_plain(self) -> int:
        # => 0 for even values, => value for odd values
        return self.value * (self.value % 2)

    @classmethod
    def from_plain(cls, plain: int) -> "BrokenCodableInteger":
        return cls(int(plain))


# ------------------------- collection specimens ------------------------- #


class SegmentIndex(NamedTuple):
    segment: int
    offset: int


class FlattenedCollection:
    """
    A list of segments presented as one collection.

    Tokens are `SegmentIndex(segment, offset)` and always point into a
    non-empty segment; `end_index` is ``SegmentIndex(len(segments), 0)``.
    `index_after` steps one element at a time, while `index_offset` and
    `distance` jump a whole segment at a time.
    """

    def __init__(self, segments: Sequence[Sequence[Any]]) -> None:
        self._segments: List[List[Any]] = [list(s) for s in segments]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._segments!r})"

    def _first_valid_from(self, segment: int) -> SegmentIndex:
        while segment < len(self._segments) and not self._segments[segment]:
            segment += 1
        return SegmentIndex(segment, 0)

    def _next_segment_start(self, segment: int) -> SegmentIndex:
        return self._first_valid_from(segment)

    @property
    def start_index(self) -> SegmentIndex:
        return self._first_valid_from(0)

    @property
    def end_index(self) -> SegmentIndex:
        return SegmentIndex(len(self._segments), 0)

    @property
    def count(self) -> int:
        return sum(len(s) for s in self._segments)

    @property
    def is_empty(self) -> bool:
        return self.start_index == self.end_index

    @property
    def first(self) -> Any:
        return MISSING if self.is_empty else self[self.start_index]

    def __len__(self) -> int:
        return self.count

    def index_after(self, index: SegmentIndex) -> SegmentIndex:
        if index >= self.end_index:
            raise IndexError(f"cannot advance past end_index {self.end_index}")
        segment, offset = index
        if offset + 1 < len(self._segments[segment]):
            return SegmentIndex(segment, offset + 1)
        return self._first_valid_from(segment + 1)

    def index_offset(self, index: SegmentIndex, distance: int) -> SegmentIndex:
        if distance < 0:
            return self._offset_backward(index, -distance)
        segment, offset = index
        remaining = distance
        while remaining > 0:
            if segment >= len(self._segments):
                raise IndexError(f"offset {distance} from {index} passes end_index")
            room = len(self._segments[segment]) - offset
            if remaining < room:
                return SegmentIndex(segment, offset + remaining)
            remaining -= room
            segment, offset = self._next_segment_start(segment + 1)
        return SegmentIndex(segment, offset)

    def _offset_backward(self, index: SegmentIndex, distance: int) -> SegmentIndex:
        segment, offset = index
        remaining = distance
        while remaining > 0:
            if offset >= remaining:
                return SegmentIndex(segment, offset - remaining)
            remaining -= offset
            previous = segment - 1
            while previous >= 0 and not self._segments[previous]:
                previous -= 1
            if previous < 0:
                raise IndexError(f"offset -{distance} from {index} passes start_index")
            segment, offset = previous, len(self._segments[previous]) - 1
            remaining -= 1
        return SegmentIndex(segment, offset)

    def distance(self, start: SegmentIndex, end: SegmentIndex) -> int:
        if end < start:
            return -self.distance(end, start)
        if start.segment == end.segment:
            return end.offset - start.offset
        between = sum(len(s) for s in self._segments[start.segment + 1 : end.segment])
        return len(self._segments[start.segment]) - start.offset + between + end.offset

    def indices(self) -> Iterator[SegmentIndex]:
        i = self.start_index
        while i != self.end_index:
            yield i
            i = self.index_after(i)

    def __getitem__(self, index: SegmentIndex) -> Any:
        segment, offset = index
        if not 0 <= segment < len(self._segments):
            raise IndexError(f"index {index} is not subscriptable")
        return self._segments[segment][offset]

    def __iter__(self) -> Iterator[Any]:
        for segment in self._segments:
            yield from segment


class SkewedFlattenedCollection(FlattenedCollection):
    """`index_offset` forgets to skip empty segments after a jump."""

    def _next_segment_start(self, segment: int) -> SegmentIndex:
        return SegmentIndex(segment, 0)


class MiscountedCollection(SequenceCollection):
    """Reports one element more than it holds."""

    @property
    def count(self) -> int:
        return super().count + 1


class LopsidedCollection(SequenceCollection):
    """Forward distances are right; backward distances overshoot by one."""

    def distance(self, start: int, end: int) -> int:
        d = super().distance(start, end)
        return d - 1 if d < 0 else d


class StutteringCollection(SequenceCollection):
    """
    Spans of two or more steps count one step too many, in both directions.

    `distance` stays antisymmetric and `index_offset` undoes it exactly, so
    index sanity only catches it by comparing distances against positions.
    """

    def distance(self, start: int, end: int) -> int:
        d = super().distance(start, end)
        if abs(d) > 1:
            return d + 1 if d > 0 else d - 1
        return d

    def index_offset(self, index: int, distance: int) -> int:
        if abs(distance) > 1:
            distance = distance - 1 if distance > 0 else distance + 1
        return super().index_offset(index, distance)


DEFAULT_SEGMENT_PATTERN = (0, 2, 1, 3, 0, 1)


def segment_values(
    values: Sequence[Any], pattern: Sequence[int] = DEFAULT_SEGMENT_PATTERN
) -> List[List[Any]]:
    """
    Split `values` into segments whose sizes cycle through `pattern`.

    Zeros in `pattern` produce empty segments; a trailing empty segment is
    always appended so that `end_index` sits past an empty segment too.
    """
    if not pattern or any(p < 0 for p in pattern) or not any(pattern):
        raise ValueError(f"pattern must be non-negative with a positive entry; got {pattern!r}")
    segments: List[List[Any]] = []
    cursor = 0
    step = 0
    while cursor < len(values):
        size = pattern[step % len(pattern)]
        segments.append(list(values[cursor : cursor + size]))
        cursor += size
        step += 1
    segments.append([])
    return segments


VALUE_SPECIMENS: Dict[str, Callable[[int], Any]] = {
    "int": int,
    "broken_equality": BrokenEqualityInteger,
    "broken_comparison": BrokenComparisonInteger,
    "broken": BrokenInteger,
}

COLLECTION_SPECIMENS: Dict[str, Callable[[List[Any]], Any]] = {
    "sequence": SequenceCollection,
    "shifted_sequence": lambda values: SequenceCollection(values, origin=100),
    "flattened": lambda values: FlattenedCollection(segment_values(values)),
    "skewed_flattened": lambda values: SkewedFlattenedCollection(segment_values(values)),
    "miscounted": MiscountedCollection,
    "lopsided": LopsidedCollection,
    "stuttering": StutteringCollection,
}
