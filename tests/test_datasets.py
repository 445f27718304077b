"""
Fixture generation, probe enumeration and small power sets.
"""

from __future__ import annotations

from typing import List

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from relcheck.datasets import (
    MAX_POWER_SET_SOURCE,
    SUPPORTED_DISTS,
    enumerate_probes,
    enumerate_uniform_probes,
    iter_probes,
    iter_uniform_probes,
    make_fixture,
    small_power_set,
)
from relcheck.datasets.specimens import segment_values
from relcheck.validate import confirm_coherent_equality, confirm_coherent_ordering


# ------------------------- fixtures ------------------------- #

def _rng(seed: int = 0) -> np.random.Generator:
    return np.random.default_rng(seed)


@pytest.mark.parametrize("dist", sorted(SUPPORTED_DISTS - {"few_uniques"}))
def test_every_dist_has_requested_length(dist: str) -> None:
    for n in (0, 1, 17):
        assert len(make_fixture(n, {"dist": dist}, _rng())) == n


def test_ascending_fixture_is_valid_ordering_input() -> None:
    values = make_fixture(50, {"dist": "ascending", "params": {"range": [0, 60]}}, _rng(3))
    assert all(a < b for a, b in zip(values, values[1:]))
    assert all(0 <= v <= 60 for v in values)
    assert confirm_coherent_ordering(values)


def test_descending_and_shuffled_are_distinct_but_not_ascending() -> None:
    desc = make_fixture(20, {"dist": "descending"}, _rng(1))
    shuffled = make_fixture(20, {"dist": "shuffled", "params": {"range": [0, 100]}}, _rng(1))
    assert confirm_coherent_equality(desc)
    assert confirm_coherent_equality(shuffled)
    assert not confirm_coherent_ordering(desc)
    assert sorted(shuffled) == make_fixture(20, {"dist": "ascending", "params": {"range": [0, 100]}}, _rng(1))


def test_uniform_and_few_uniques() -> None:
    assert make_fixture(4, {"dist": "uniform", "params": {"value": 9}}, _rng()) == [9, 9, 9, 9]
    values = make_fixture(40, {"dist": "few_uniques", "params": {"k": 3}}, _rng(2))
    assert len(values) == 40
    assert len(set(values)) <= 3
    assert make_fixture(5, {"dist": "range"}, _rng()) == [0, 1, 2, 3, 4]


def test_fixtures_are_reproducible_for_a_seed() -> None:
    spec = {"dist": "shuffled"}
    assert make_fixture(30, spec, _rng(42)) == make_fixture(30, spec, _rng(42))


@pytest.mark.parametrize(
    "n, spec",
    [
        (-1, {"dist": "range"}),
        (3, {"dist": "nope"}),
        (3, "ascending"),
        (5, {"dist": "ascending", "params": {"range": [0, 3]}}),
        (3, {"dist": "ascending", "params": {"range": [5, 1]}}),
        (3, {"dist": "few_uniques"}),
        (3, {"dist": "few_uniques", "params": {"k": 0}}),
        (3, {"dist": "uniform", "params": {"value": "x"}}),
    ],
)
def test_invalid_specs_raise(n: int, spec) -> None:
    with pytest.raises(ValueError):
        make_fixture(n, spec, _rng())


# ------------------------- probes ------------------------- #

def test_probes_enumerate_the_cartesian_product() -> None:
    assert list(iter_probes([1, 2], "ab")) == [(1, "a"), (1, "b"), (2, "a"), (2, "b")]
    seen: List[tuple] = []
    visited = enumerate_probes(range(2), range(3), range(4), visitor=lambda *p: seen.append(p))
    assert visited == len(seen) == 24
    assert seen[0] == (0, 0, 0) and seen[-1] == (1, 2, 3)


def test_uniform_probes() -> None:
    assert len(list(iter_uniform_probes(range(3), 3))) == 27
    assert enumerate_uniform_probes([], 2, visitor=lambda *p: None) == 0
    triples = []
    enumerate_uniform_probes(iter("xy"), 2, visitor=lambda a, b: triples.append(a + b))
    assert triples == ["xx", "xy", "yx", "yy"]
    with pytest.raises(ValueError):
        list(iter_uniform_probes([1], 0))
    with pytest.raises(ValueError):
        iter_probes()


# ------------------------- power sets ------------------------- #

def test_small_power_set_in_bit_pattern_order() -> None:
    assert small_power_set([]) == [[]]
    assert small_power_set("abc") == [
        [], ["a"], ["b"], ["a", "b"], ["c"], ["a", "c"], ["b", "c"], ["a", "b", "c"],
    ]


def test_small_power_set_bounds() -> None:
    assert len(small_power_set(range(MAX_POWER_SET_SOURCE))) == 2 ** MAX_POWER_SET_SOURCE
    with pytest.raises(ValueError):
        small_power_set(range(MAX_POWER_SET_SOURCE + 1))


@settings(deadline=None, max_examples=40)
@given(st.lists(st.integers(), unique=True, max_size=MAX_POWER_SET_SOURCE))
def test_property_power_set_subsets_are_distinct(values: List[int]) -> None:
    subsets = small_power_set(values)
    assert len(subsets) == 2 ** len(values)
    assert len({frozenset(s) for s in subsets}) == len(subsets)


# ------------------------- segmenting ------------------------- #

def test_segment_values_cycles_pattern_and_appends_empty_tail() -> None:
    assert segment_values(list(range(5)), (0, 2)) == [[], [0, 1], [], [2, 3], [], [4], []]
    with pytest.raises(ValueError):
        segment_values([1], (0, 0))
