"""
Sweep runner: runs confirmation-form checks over generated fixtures, sharding
the independent trials of each cell across a thread pool.

Usage (from repo root):
    python -m relcheck.bench.runner experiments/configs/01_coherence_sweep.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per trial
    - cells.jsonl             # one JSON line per cell, incl. failing trial numbers
    - summary.csv             # pass rate + median time per cell
    - (console) rich/tqdm summaries

Design notes:
- A cell is one (size, fixture spec, check, specimen) probe.
- Each trial gets its own fixture, drawn serially from the seeded RNG before
  any work is submitted, so results do not depend on thread scheduling.
- Workers tally passes in a `SynchronizedCounter` and failing trial numbers
  in a `SynchronizedIndexSet`; the verifiers themselves share nothing.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import platform
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from relcheck.bench.accumulators import SynchronizedCounter, SynchronizedIndexSet
from relcheck.bench.measure import time_check_call
from relcheck.datasets import make_fixture
from relcheck.datasets.probes import iter_probes
from relcheck.datasets.specimens import COLLECTION_SPECIMENS, VALUE_SPECIMENS
from relcheck.validate import (
    confirm_coherent_equality,
    confirm_coherent_ordering,
    confirm_collection_basic_sanity,
    confirm_collection_index_sanity,
    confirm_pairwise_distinct_elements,
)

_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "trials",
    "workers",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "sizes",
    "fixtures",
    "checks",
]

# check name -> (confirmation function, subject kind)
CHECK_REGISTRY: Dict[str, tuple] = {
    "equality": (confirm_coherent_equality, "value"),
    "ordering": (confirm_coherent_ordering, "value"),
    "distinct": (confirm_pairwise_distinct_elements, "value"),
    "basic": (confirm_collection_basic_sanity, "collection"),
    "index": (confirm_collection_index_sanity, "collection"),
}


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class CheckSpec:
    check: str
    specimen: str
    confirm_fn: Callable[[Any], bool]
    build_subject: Callable[[List[int]], Any]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S_%f")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode("utf-8").strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


# ------------------------- helpers: config ------------------------- #

def _value_builder(ctor: Callable[[int], Any]) -> Callable[[List[int]], Any]:
    return lambda values: [ctor(v) for v in values]


def _resolve_checks(cfg_checks: List[Dict[str, Any]]) -> List[CheckSpec]:
    specs: List[CheckSpec] = []
    seen = set()
    for entry in cfg_checks:
        name = entry.get("name", None)
        if name not in CHECK_REGISTRY:
            raise ValueError(f"Unknown check {name!r}. Supported: {sorted(CHECK_REGISTRY)}")
        confirm_fn, kind = CHECK_REGISTRY[name]
        registry = VALUE_SPECIMENS if kind == "value" else COLLECTION_SPECIMENS

        specimens = entry.get("specimens", None)
        if not specimens or not isinstance(specimens, list):
            raise ValueError(f"Check {name!r}: 'specimens' must be a non-empty list")
        for specimen in specimens:
            if specimen not in registry:
                raise ValueError(
                    f"Check {name!r} takes {kind} specimens {sorted(registry)}; got {specimen!r}"
                )
            if (name, specimen) in seen:
                raise ValueError(f"Duplicate check/specimen pair in config: {name}/{specimen}")
            seen.add((name, specimen))
            ctor = registry[specimen]
            build = _value_builder(ctor) if kind == "value" else ctor
            specs.append(CheckSpec(check=name, specimen=specimen, confirm_fn=confirm_fn, build_subject=build))
    return specs


# ------------------------- helpers: summary ------------------------- #

_SUMMARY_COLUMNS = ["check", "specimen", "dist", "n", "trials", "passed", "pass_rate", "median_ns", "min_ns", "max_ns"]


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    if df.empty:
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)

    df["passed"] = df["verdict"].fillna(False).astype(bool) & (df["status"] != "error")
    agg = (
        df.groupby(["check", "specimen", "dist", "n"], as_index=False)
        .agg(
            trials=("trial", "count"),
            passed=("passed", "sum"),
            median_ns=("time_ns", "median"),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
        )
    )
    agg["pass_rate"] = agg["passed"] / agg["trials"]
    # timings are NaN for cells where every trial errored
    agg[["median_ns", "min_ns", "max_ns"]] = agg[["median_ns", "min_ns", "max_ns"]].fillna(-1).astype("int64")
    agg["passed"] = agg["passed"].astype("int64")
    return agg[_SUMMARY_COLUMNS].sort_values(["check", "specimen", "dist", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame) -> None:
    table = Table(title="Coherence Sweep Summary")
    table.add_column("Check", style="bold")
    table.add_column("Specimen")
    table.add_column("Fixture")
    table.add_column("n", justify="right")
    table.add_column("Passed", justify="right")
    table.add_column("median ms", justify="right")

    if summary.empty:
        _console.print("(no samples)")
        return

    for row in summary.itertuples(index=False):
        style = "green" if row.passed == row.trials else ("red" if row.passed == 0 else "yellow")
        median = "-" if row.median_ns < 0 else f"{row.median_ns / 1e6:.3f}"
        table.add_row(
            row.check,
            row.specimen,
            row.dist,
            str(row.n),
            f"[{style}]{row.passed}/{row.trials}[/]",
            median,
        )
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def _run_trial(
    spec: CheckSpec,
    trial: int,
    values: List[int],
    settings: Dict[str, Any],
    passed: SynchronizedCounter,
    failed: SynchronizedIndexSet,
) -> Dict[str, Any]:
    subject = spec.build_subject(values)
    res = time_check_call(
        check_name=spec.check,
        check_fn=spec.confirm_fn,
        subject=subject,
        **settings,
    )
    if res["status"] != "error" and res["verdict"]:
        passed.increment()
    else:
        failed.insert(trial)
    samples = res["samples_ns"]
    return {
        "trial": trial,
        "verdict": res["verdict"],
        "status": res["status"],
        "error": res["error"],
        "time_ns": int(np.median(samples)) if samples else None,
    }


def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config must be a YAML mapping: {config_path}")

    # Required keys & basic validation
    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"]]
    trials: int = int(cfg["trials"])
    workers: int = int(cfg["workers"])
    fixtures: List[Dict[str, Any]] = [dict(f) for f in cfg["fixtures"]]
    settings = {
        "repeats": int(cfg["repeats"]),
        "warmup": bool(cfg["warmup"]),
        "disable_gc": bool(cfg["disable_gc"]),
        "timeout_seconds": float(cfg["timeout_seconds"]),
    }

    if not sizes or any(n < 0 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")
    if trials < 1 or workers < 1:
        raise ValueError("Config 'trials' and 'workers' must be >= 1")
    if not fixtures:
        raise ValueError("Config 'fixtures' must be a non-empty list of fixture specs")
    if settings["disable_gc"] and workers > 1:
        raise ValueError("'disable_gc' toggles process-wide state; use it with workers: 1")

    checks = _resolve_checks(list(cfg["checks"]))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    cells_path = run_dir / "cells.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Checks:[/bold] {', '.join(f'{c.check}/{c.specimen}' for c in checks)}")
    _console.print()

    cells = list(iter_probes(sizes, fixtures, checks))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for n, fixture_spec, spec in tqdm(cells, desc="Cells", unit="cell"):
            dist = str(fixture_spec.get("dist"))
            # fixtures are drawn serially so the RNG stream is scheduling-independent
            inputs = [make_fixture(n, fixture_spec, rng) for _ in range(trials)]

            passed = SynchronizedCounter(f"{spec.check}/{spec.specimen}/{dist}/{n}")
            failed = SynchronizedIndexSet(f"{spec.check}/{spec.specimen}/{dist}/{n}")
            rows = list(
                pool.map(
                    lambda item: _run_trial(spec, item[0], item[1], settings, passed, failed),
                    enumerate(inputs),
                )
            )

            for row in rows:
                _append_jsonl(
                    {"check": spec.check, "specimen": spec.specimen, "dist": dist, "n": n, **row},
                    results_path,
                )
            _append_jsonl(
                {
                    "check": spec.check,
                    "specimen": spec.specimen,
                    "dist": dist,
                    "n": n,
                    "fixture": fixture_spec,
                    "trials": trials,
                    "passed": passed.current_count,
                    "failed_trials": sorted(failed.current_indices),
                },
                cells_path,
            )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)

    _print_rich_summary(summary_df)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for path in (results_path, cells_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a relational-coherence sweep from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML sweep config")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
