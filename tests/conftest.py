"""
Shared test configuration.

Inserts the project `src/` onto sys.path so tests run without installing the package.
"""

from __future__ import annotations

import pathlib
import sys

import pytest

# Ensure `src/` is importable when running `pytest` from the repo root
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

TEST_COUNTS = [2, 10, 100]


@pytest.fixture(params=TEST_COUNTS, ids=lambda n: f"n={n}")
def count(request) -> int:
    return request.param
