"""
Datasets package public API.

Re-export the fixture generator and enumeration helpers so callers can write:
    from relcheck.datasets import make_fixture, iter_probes, small_power_set
"""

from .fixtures import SUPPORTED_DISTS, make_fixture
from .powerset import MAX_POWER_SET_SOURCE, small_power_set
from .probes import enumerate_probes, enumerate_uniform_probes, iter_probes, iter_uniform_probes
from .specimens import COLLECTION_SPECIMENS, VALUE_SPECIMENS

__all__ = [
    "SUPPORTED_DISTS",
    "make_fixture",
    "MAX_POWER_SET_SOURCE",
    "small_power_set",
    "iter_probes",
    "enumerate_probes",
    "iter_uniform_probes",
    "enumerate_uniform_probes",
    "VALUE_SPECIMENS",
    "COLLECTION_SPECIMENS",
]
