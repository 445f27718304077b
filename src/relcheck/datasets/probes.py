"""
Probe enumeration: cartesian products of fixture pools.

A *probe* is one tuple drawn from the cartesian product of its pools, e.g.
one (size, fixture-spec, check) combination in a sweep, or one (a, b, c)
triple for an algebraic-law test.

Public API (stable):
    iter_probes(*pools) -> Iterator[tuple]
    enumerate_probes(*pools, visitor) -> int
    iter_uniform_probes(values, arity) -> Iterator[tuple]
    enumerate_uniform_probes(values, arity, visitor) -> int

Conventions:
- Pools are materialized once, so one-shot iterables are fine.
- The `enumerate_*` forms are unstoppable: `visitor` is called on every probe,
  and the number of probes visited is returned.
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Iterable, Iterator, Tuple

__all__ = [
    "iter_probes",
    "enumerate_probes",
    "iter_uniform_probes",
    "enumerate_uniform_probes",
]


def iter_probes(*pools: Iterable[Any]) -> Iterator[Tuple[Any, ...]]:
    """Yield every element of the cartesian product of `pools`, last pool fastest."""
    if not pools:
        raise ValueError("iter_probes needs at least one pool")
    return itertools.product(*[list(p) for p in pools])


def enumerate_probes(*pools: Iterable[Any], visitor: Callable[..., Any]) -> int:
    """Call ``visitor(*probe)`` once per probe; return the number of probes."""
    visited = 0
    for probe in iter_probes(*pools):
        visitor(*probe)
        visited += 1
    return visited


def iter_uniform_probes(values: Iterable[Any], arity: int) -> Iterator[Tuple[Any, ...]]:
    """Yield the `arity`-fold cartesian product of `values` with itself."""
    if arity < 1:
        raise ValueError(f"arity must be >= 1; got {arity}")
    return itertools.product(list(values), repeat=arity)


def enumerate_uniform_probes(
    values: Iterable[Any], arity: int, visitor: Callable[..., Any]
) -> int:
    """Uniform counterpart of `enumerate_probes`; empty `values` visits nothing."""
    visited = 0
    for probe in iter_uniform_probes(values, arity):
        visitor(*probe)
        visited += 1
    return visited
