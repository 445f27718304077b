"""
Validation utilities public API.

Re-exports:
    - Reporting:
        Violation, ViolationKind, ViolationRecorder
        ViolationError, FixtureError

    - Collection contract:
        MISSING, IndexedCollection, SequenceCollection
        as_indexed_collection, count_by_iterating

    - Verifiers (assertion form / confirmation form):
        assert_collection_basic_sanity / confirm_collection_basic_sanity
        assert_coherent_equality / confirm_coherent_equality
        assert_coherent_ordering / confirm_coherent_ordering
        assert_collection_index_sanity / confirm_collection_index_sanity
        assert_pairwise_distinct_elements / confirm_pairwise_distinct_elements
        assert_disjoint_collections / confirm_disjoint_collections
        assert_serialization_round_trip / confirm_serialization_round_trip
"""

from .basic import assert_collection_basic_sanity, confirm_collection_basic_sanity
from .collection import (
    MISSING,
    IndexedCollection,
    SequenceCollection,
    as_indexed_collection,
    count_by_iterating,
)
from .elements import (
    assert_disjoint_collections,
    assert_pairwise_distinct_elements,
    confirm_disjoint_collections,
    confirm_pairwise_distinct_elements,
)
from .equality import assert_coherent_equality, confirm_coherent_equality
from .indices import assert_collection_index_sanity, confirm_collection_index_sanity
from .ordering import assert_coherent_ordering, confirm_coherent_ordering
from .report import (
    FixtureError,
    Violation,
    ViolationError,
    ViolationKind,
    ViolationRecorder,
)
from .roundtrip import (
    Codec,
    DEFAULT_CODECS,
    assert_serialization_round_trip,
    confirm_serialization_round_trip,
)

__all__ = [
    "Violation",
    "ViolationKind",
    "ViolationRecorder",
    "ViolationError",
    "FixtureError",
    "MISSING",
    "IndexedCollection",
    "SequenceCollection",
    "as_indexed_collection",
    "count_by_iterating",
    "assert_collection_basic_sanity",
    "confirm_collection_basic_sanity",
    "assert_coherent_equality",
    "confirm_coherent_equality",
    "assert_coherent_ordering",
    "confirm_coherent_ordering",
    "assert_collection_index_sanity",
    "confirm_collection_index_sanity",
    "assert_pairwise_distinct_elements",
    "confirm_pairwise_distinct_elements",
    "assert_disjoint_collections",
    "confirm_disjoint_collections",
    "Codec",
    "DEFAULT_CODECS",
    "assert_serialization_round_trip",
    "confirm_serialization_round_trip",
]
