"""
Timing harness for verification checks.

Each sample is one call to a confirmation-form check ``check_fn(subject)``,
timed with `time.perf_counter_ns`. The verdict of the last completed call is
kept alongside the samples.

Public API (stable):
    time_check_call(... ) -> dict

Returned dict schema:
    {
        "check": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "verdict": bool | None,             # result of the last successful call
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
    }
"""

from __future__ import annotations

import gc
import time
from typing import Any, Callable, Dict, List

__all__ = ["time_check_call"]


def time_check_call(
    *,
    check_name: str,
    check_fn: Callable[[Any], bool],
    subject: Any,
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
) -> Dict[str, Any]:
    """
    Time repeated calls to `check_fn(subject)`.

    Parameters
    ----------
    check_name : str
        Logical name of the check (for records).
    check_fn : Callable[[Any], bool]
        A confirmation-form verifier.
    subject : Any
        Fixture or collection under test. Verifiers are read-only, so the same
        subject is reused across samples.
    repeats : int
        Number of timed samples to collect (>= 1 for a verdict).
    warmup : bool
        If True, make one untimed call before timing.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample timeout threshold. A slower sample marks status="timeout"
        and stops further sampling (its verdict still counts).

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    samples: List[int] = []
    result: Dict[str, Any] = {
        "check": check_name,
        "repeats": repeats,
        "samples_ns": samples,
        "verdict": None,
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            check_fn(subject)
        except Exception as e:
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                t0 = time.perf_counter_ns()
                verdict = check_fn(subject)
                t1 = time.perf_counter_ns()
            except Exception as e:
                result["status"] = "error"
                result["error"] = f"check failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            samples.append(elapsed)
            result["verdict"] = bool(verdict)

            if elapsed > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break

    finally:
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
