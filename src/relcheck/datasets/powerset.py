"""
Small power sets, for exhaustive tests over every subset of a tiny pool.

Public API (stable):
    MAX_POWER_SET_SOURCE = 8
    small_power_set(values) -> list[list]

Subsets are produced in bit-pattern order: subset number `b` holds
``values[i]`` for every set bit `i` of `b`, so the first subset is empty and
the last is all of `values`.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence

__all__ = ["MAX_POWER_SET_SOURCE", "small_power_set"]

MAX_POWER_SET_SOURCE = 8


def small_power_set(values: Sequence[Any]) -> List[List[Any]]:
    """
    Return all ``2 ** len(values)`` subsets of `values`.

    Raises
    ------
    ValueError
        If `values` holds more than `MAX_POWER_SET_SOURCE` elements; slice
        the pool yourself if you need more.
    """
    pool = list(values)
    upper = _iteration_upper_bound(len(pool))
    return [[pool[i] for i in _set_bits(bitset)] for bitset in range(upper + 1)]


def _iteration_upper_bound(count: int) -> int:
    if not 0 <= count <= MAX_POWER_SET_SOURCE:
        raise ValueError(
            f"small_power_set supports 0..{MAX_POWER_SET_SOURCE} elements; got {count}"
        )
    return (1 << count) - 1


def _set_bits(bitset: int) -> Iterator[int]:
    shift = 0
    while bitset:
        if bitset & 1:
            yield shift
        bitset >>= 1
        shift += 1
