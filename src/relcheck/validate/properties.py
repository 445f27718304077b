"""
Property helpers over trusted ground-truth keys.

The verifiers never trust the operators of the type under test to tell them
whether a fixture is well-formed. When a caller supplies a `key` projection
(e.g. ``lambda v: v.value``), these helpers judge the projected keys instead,
using the keys' own (trusted) operators.

Public API (stable):
    is_strictly_ascending(keys: Sequence) -> bool
    first_strict_ascending_violation_index(keys: Sequence) -> int | None
    first_repeated_position(keys: Sequence) -> tuple[int, int] | None
    require_distinct_keys(values, key) -> None
    require_ascending_distinct_keys(values, key) -> None

Notes
-----
- `first_repeated_position` uses a dict when the keys are hashable and falls
  back to a quadratic scan otherwise.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .report import FixtureError

__all__ = [
    "is_strictly_ascending",
    "first_strict_ascending_violation_index",
    "first_repeated_position",
    "require_distinct_keys",
    "require_ascending_distinct_keys",
]


def is_strictly_ascending(keys: Sequence[Any]) -> bool:
    """Return True iff keys[i] < keys[i+1] for all i."""
    return first_strict_ascending_violation_index(keys) is None


def first_strict_ascending_violation_index(keys: Sequence[Any]) -> Optional[int]:
    """
    Return the first index i where not (keys[i] < keys[i+1]), or None.

    Useful for precise error messages:
        i = first_strict_ascending_violation_index(keys)
        assert i is None, f"not ascending at i={i}: {keys[i]} !< {keys[i+1]}"
    """
    for i in range(len(keys) - 1):
        if not keys[i] < keys[i + 1]:
            return i
    return None


def first_repeated_position(keys: Sequence[Any]) -> Optional[Tuple[int, int]]:
    """
    Return (earlier, later) positions of the first repeated key, or None.

    "First" means the smallest `later` position.
    """
    try:
        seen: Dict[Any, int] = {}
        for position, k in enumerate(keys):
            if k in seen:
                return seen[k], position
            seen[k] = position
        return None
    except TypeError:
        # unhashable keys
        pass
    for later in range(len(keys)):
        for earlier in range(later):
            if keys[earlier] == keys[later]:
                return earlier, later
    return None


def _project(values: Sequence[Any], key: Callable[[Any], Any]) -> List[Any]:
    return [key(v) for v in values]


def require_distinct_keys(values: Sequence[Any], key: Callable[[Any], Any]) -> None:
    """Raise FixtureError unless `key` maps `values` to pairwise-distinct keys."""
    keys = _project(values, key)
    repeated = first_repeated_position(keys)
    if repeated is not None:
        earlier, later = repeated
        raise FixtureError(
            f"Fixture must be pairwise-distinct, but positions {earlier} and {later} "
            f"share key {keys[later]!r} ({values[earlier]!r}, {values[later]!r})"
        )


def require_ascending_distinct_keys(
    values: Sequence[Any], key: Callable[[Any], Any]
) -> None:
    """Raise FixtureError unless `key` maps `values` to strictly ascending keys."""
    keys = _project(values, key)
    i = first_strict_ascending_violation_index(keys)
    if i is not None:
        raise FixtureError(
            f"Fixture must be distinct and ascending, but at position {i} key "
            f"{keys[i]!r} is not < key {keys[i + 1]!r} ({values[i]!r}, {values[i + 1]!r})"
        )
