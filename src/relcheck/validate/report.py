"""
Violation records and the recorder that collects them.

Every verifier in `relcheck.validate` is written as a lazy generator of
`Violation` objects. Two thin drivers turn such a generator into the two
public forms:

    run_assertion(violations, recorder)   # records everything, may raise
    run_confirmation(violations)          # True iff the generator is empty

Public API (stable):
    ViolationKind
    Violation
    ViolationError
    FixtureError
    ViolationRecorder
    run_assertion(violations, recorder) -> list[Violation]
    run_confirmation(violations) -> bool

Conventions:
- A detected inconsistency is data, not an exception. The only exception the
  assertion form raises on purpose is `ViolationError`, once, after every
  clause has been checked (or immediately, if the recorder halts on the
  first failure).
- `ViolationError` subclasses `AssertionError`, so pytest reports it as an
  ordinary test failure.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Tuple

__all__ = [
    "ViolationKind",
    "Violation",
    "ViolationError",
    "FixtureError",
    "ViolationRecorder",
    "run_assertion",
    "run_confirmation",
]


class ViolationKind(str, Enum):
    CARDINALITY = "cardinality"
    EMPTINESS = "emptiness"
    EQUALITY = "equality"
    ORDERING = "ordering"
    INDEX_ARITHMETIC = "index_arithmetic"
    DISTINCTNESS = "distinctness"
    DISJOINTNESS = "disjointness"
    ROUND_TRIP = "round_trip"


@dataclass(frozen=True)
class Violation:
    """
    One failed clause.

    Attributes
    ----------
    kind : ViolationKind
        Defect category.
    relation : str
        The clause that failed, written as an expression (e.g. ``"a < b"``).
    expected, observed : Any
        Ground-truth result and the result the type under test produced.
    positions : tuple[int, ...]
        Ground-truth positions of the operands, when the clause has any.
    operands : tuple
        The values (or index tokens) the clause was evaluated on.
    detail : str
        Free-form extra context.
    """

    kind: ViolationKind
    relation: str
    expected: Any
    observed: Any
    positions: Tuple[int, ...] = ()
    operands: Tuple[Any, ...] = ()
    detail: str = ""

    def describe(self) -> str:
        parts = [
            f"[{self.kind.value}] `{self.relation}` should => {self.expected!r}, "
            f"but instead => {self.observed!r}"
        ]
        if self.positions:
            parts.append("positions " + ", ".join(str(p) for p in self.positions))
        if self.operands:
            parts.append("operands " + ", ".join(repr(o) for o in self.operands))
        if self.detail:
            parts.append(self.detail)
        return "; ".join(parts)


class ViolationError(AssertionError):
    """Raised by the assertion form once violations have been recorded."""

    def __init__(self, violations: List[Violation]) -> None:
        self.violations = list(violations)
        lines = [f"{len(self.violations)} violation(s) found:"]
        lines.extend(f"  - {v.describe()}" for v in self.violations)
        super().__init__("\n".join(lines))


class FixtureError(ValueError):
    """The supplied fixture does not meet the verifier's input precondition."""


class ViolationRecorder:
    """
    Collects violations across one or more verifier calls.

    Passing the same recorder to several `assert_*` calls aggregates their
    findings; nothing is raised until `raise_if_failed()` is called, unless
    `halt_on_first_failure` is set, in which case the first recorded violation
    raises `ViolationError` at once.
    """

    def __init__(self, *, halt_on_first_failure: bool = False) -> None:
        self.halt_on_first_failure = halt_on_first_failure
        self.violations: List[Violation] = []

    def __len__(self) -> int:
        return len(self.violations)

    def __repr__(self) -> str:
        return (
            f"ViolationRecorder(violations={len(self.violations)}, "
            f"halt_on_first_failure={self.halt_on_first_failure})"
        )

    @property
    def failed(self) -> bool:
        return bool(self.violations)

    def record(self, violation: Violation) -> None:
        self.violations.append(violation)
        if self.halt_on_first_failure:
            raise ViolationError([violation])

    def record_all(self, violations: Iterable[Violation]) -> List[Violation]:
        """Drain `violations` into the recorder; return what was drained."""
        found: List[Violation] = []
        for violation in violations:
            found.append(violation)
            self.record(violation)
        return found

    def raise_if_failed(self) -> None:
        if self.violations:
            raise ViolationError(self.violations)

    def clear(self) -> None:
        self.violations.clear()

    @contextmanager
    def halting_on_first_failure(self) -> Iterator["ViolationRecorder"]:
        """Within the block, the first recorded violation raises immediately."""
        with self._halting(True):
            yield self

    @contextmanager
    def continuing_after_failure(self) -> Iterator["ViolationRecorder"]:
        """Within the block, violations are only recorded."""
        with self._halting(False):
            yield self

    @contextmanager
    def _halting(self, halt: bool) -> Iterator[None]:
        previous = self.halt_on_first_failure
        self.halt_on_first_failure = halt
        try:
            yield
        finally:
            self.halt_on_first_failure = previous


def run_assertion(
    violations: Iterable[Violation], recorder: Optional[ViolationRecorder]
) -> List[Violation]:
    """
    Drive a violation generator in assertion form.

    With `recorder=None` a private recorder is used and `ViolationError` is
    raised if anything was found; otherwise findings are only recorded.
    """
    owned = recorder is None
    sink = ViolationRecorder() if recorder is None else recorder
    found = sink.record_all(violations)
    if owned:
        sink.raise_if_failed()
    return found


def run_confirmation(violations: Iterable[Violation]) -> bool:
    """True iff `violations` yields nothing; stops at the first violation."""
    return next(iter(violations), None) is None
