"""
Serialization round-trip: does a value encode and decode back to itself?

A value is first mapped to plain data (`to_plain`, identity by default), then
pushed through every codec in turn: ``loads(dumps(plain))``, mapped back with
`from_plain`, and compared to the original with ``==``.

Public API (stable):
    Codec(name, dumps, loads)
    JSON_CODEC, YAML_CODEC, DEFAULT_CODECS
    assert_serialization_round_trip(value, *, to_plain=None, from_plain=None,
                                    codecs=DEFAULT_CODECS, recorder=None)
    confirm_serialization_round_trip(value, *, to_plain=None, from_plain=None,
                                     codecs=DEFAULT_CODECS) -> bool

Conventions:
- Encoding or decoding errors are recorded as round-trip violations; they are
  never propagated.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator, List, NamedTuple, Optional, Sequence

import yaml

from .report import (
    Violation,
    ViolationKind,
    ViolationRecorder,
    run_assertion,
    run_confirmation,
)

__all__ = [
    "Codec",
    "JSON_CODEC",
    "YAML_CODEC",
    "DEFAULT_CODECS",
    "assert_serialization_round_trip",
    "confirm_serialization_round_trip",
]


class Codec(NamedTuple):
    name: str
    dumps: Callable[[Any], Any]
    loads: Callable[[Any], Any]


JSON_CODEC = Codec("json", json.dumps, json.loads)
YAML_CODEC = Codec("yaml", yaml.safe_dump, yaml.safe_load)
DEFAULT_CODECS = (JSON_CODEC, YAML_CODEC)


def _identity(x: Any) -> Any:
    return x


def _iter_round_trip_violations(
    value: Any,
    to_plain: Callable[[Any], Any],
    from_plain: Callable[[Any], Any],
    codecs: Sequence[Codec],
) -> Iterator[Violation]:
    for codec in codecs:
        relation = f"{codec.name}: decode(encode(value)) == value"
        try:
            encoded = codec.dumps(to_plain(value))
        except Exception as e:
            yield Violation(
                ViolationKind.ROUND_TRIP, relation, value, None,
                operands=(value,), detail=f"encoding failed: {e!r}",
            )
            continue
        try:
            decoded = from_plain(codec.loads(encoded))
        except Exception as e:
            yield Violation(
                ViolationKind.ROUND_TRIP, relation, value, None,
                operands=(value,), detail=f"decoding failed: {e!r} from {encoded!r}",
            )
            continue
        if not bool(decoded == value):
            yield Violation(
                ViolationKind.ROUND_TRIP, relation, value, decoded,
                operands=(value,), detail=f"encoded as {encoded!r}",
            )


def assert_serialization_round_trip(
    value: Any,
    *,
    to_plain: Optional[Callable[[Any], Any]] = None,
    from_plain: Optional[Callable[[Any], Any]] = None,
    codecs: Sequence[Codec] = DEFAULT_CODECS,
    recorder: Optional[ViolationRecorder] = None,
) -> List[Violation]:
    """Record a violation for every codec through which `value` fails to round-trip."""
    violations = _iter_round_trip_violations(
        value, to_plain or _identity, from_plain or _identity, codecs
    )
    return run_assertion(violations, recorder)


def confirm_serialization_round_trip(
    value: Any,
    *,
    to_plain: Optional[Callable[[Any], Any]] = None,
    from_plain: Optional[Callable[[Any], Any]] = None,
    codecs: Sequence[Codec] = DEFAULT_CODECS,
) -> bool:
    """Return True iff `value` round-trips through every codec."""
    violations = _iter_round_trip_violations(
        value, to_plain or _identity, from_plain or _identity, codecs
    )
    return run_confirmation(violations)
