"""
Fixture generators for the coherence verifiers.

Currently implemented:
- dist == "range":
    Deterministic [0, 1, ..., n-1]; ignores params and RNG.

- dist == "ascending":
    n distinct integers drawn from an inclusive range, strictly ascending.
    This is the well-formed input for the ordering verifier.

- dist == "descending":
    Like "ascending", reversed. Distinct, so fine for the equality verifier,
    but violates the ordering verifier's precondition.

- dist == "shuffled":
    Like "ascending", in a random order.

- dist == "uniform":
    n copies of one integer drawn from the range (or params["value"]).

- dist == "few_uniques":
    Choose up to k distinct integers from the range, then fill the fixture
    by sampling among them.

Public API (stable):
    make_fixture(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]

Conventions:
- params["range"] is **inclusive** on both ends and defaults to
  [0, 4294967295].
- Returns a Python `list[int]` (the verifiers stay NumPy-agnostic).
- The caller supplies the RNG (for reproducibility across runs).
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import numpy as np

SUPPORTED_DISTS = {
    "range",
    "ascending",
    "descending",
    "shuffled",
    "uniform",
    "few_uniques",
}
DEFAULT_RANGE: Tuple[int, int] = (0, 4294967295)

__all__ = ["SUPPORTED_DISTS", "make_fixture"]


def make_fixture(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate an integer fixture according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        Distribution specification, e.g.

            {"dist": "ascending", "params": {"range": [0, 1000]}}
            {"dist": "uniform", "params": {"value": 7}}
            {"dist": "few_uniques", "params": {"k": 3}}

    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Returns
    -------
    list[int]

    Raises
    ------
    ValueError
        If inputs are invalid, the distribution is unsupported, or the range
        is too small to hold `n` distinct values.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported fixture dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params", None) or {}

    if dist == "range":
        return list(range(n))

    if dist in ("ascending", "descending", "shuffled"):
        lo, hi = _parse_optional_inclusive_range(params, default=DEFAULT_RANGE)
        values = sorted(_draw_distinct(n, lo, hi, rng))
        if dist == "descending":
            values.reverse()
        elif dist == "shuffled":
            order = rng.permutation(n)
            values = [values[int(i)] for i in order]
        return values

    if dist == "uniform":
        if n == 0:
            return []
        if "value" in params:
            if not _is_int_like(params["value"]):
                raise ValueError("uniform.params.value must be an integer")
            value = int(params["value"])
        else:
            lo, hi = _parse_optional_inclusive_range(params, default=DEFAULT_RANGE)
            value = int(rng.integers(lo, hi + 1))
        return [value] * n

    if dist == "few_uniques":
        k = _parse_k(params)
        lo, hi = _parse_optional_inclusive_range(params, default=DEFAULT_RANGE)
        if n == 0:
            return []
        # cannot use more unique values than the span or the fixture holds
        actual_k = int(min(k, n, hi - lo + 1))
        chosen = _draw_distinct(actual_k, lo, hi, rng)
        idxs = rng.integers(0, actual_k, size=n)
        return [chosen[int(t)] for t in idxs]

    # Should be unreachable because of the check above; keep explicit for clarity.
    raise ValueError(f"Unhandled fixture dist: {dist!r}")


# ------------------------- helpers ------------------------- #


def _draw_distinct(count: int, lo: int, hi: int, rng: np.random.Generator) -> List[int]:
    """
    Draw `count` distinct integers in [lo, hi], in draw order.

    Draws in oversampled batches until enough unique values are collected,
    which stays cheap while `count` is far below the span.
    """
    span = hi - lo + 1
    if count > span:
        raise ValueError(
            f"cannot draw {count} distinct values from [{lo}, {hi}] (span {span})"
        )
    chosen: List[int] = []
    seen = set()
    while len(chosen) < count:
        need = count - len(chosen)
        batch = rng.integers(lo, hi + 1, size=need * 2, dtype=np.int64)
        for v in map(int, batch):
            if v not in seen:
                seen.add(v)
                chosen.append(v)
                if len(chosen) == count:
                    break
    return chosen


def _validate_n(n: int) -> None:
    if not isinstance(n, int):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _parse_optional_inclusive_range(
    params: Dict[str, Any], default: Tuple[int, int]
) -> Tuple[int, int]:
    """
    Parse an optional inclusive integer range from params.
    If not present, return `default`.
    """
    if "range" not in params:
        return default
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_k(params: Dict[str, Any]) -> int:
    """
    Parse and validate k (desired #unique values) for few_uniques.
    Must be an integer >= 1.
    """
    if "k" not in params:
        raise ValueError("few_uniques.params.k must be provided (int >= 1)")
    k = params["k"]
    if not isinstance(k, int) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    return k


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types
    return isinstance(x, (int, np.integer))
