from __future__ import annotations
"""
DAC - Decentralized Autonomous Charity governance core.

Contributors donate into a shared treasury, proposals request disbursements to
a beneficiary, and contributors vote with weight equal to their cumulative
contribution. Submodules are lazily imported to keep import time minimal.

Public surface (lazily loaded):
- config, errors, metrics, version
- govtypes, treasury, registry, proposals, votes
- state, engine
"""


import importlib
from typing import List

from .version import __version__

__all__: List[str] = [
    "__version__",
    "config",
    "errors",
    "metrics",
    "govtypes",
    "treasury",
    "registry",
    "proposals",
    "votes",
    "state",
    "engine",
]

_lazy_modules = set(__all__) - {"__version__"}


def __getattr__(name: str):
    if name in _lazy_modules:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(set(globals().keys()) | _lazy_modules)


def get_version() -> str:
    """Return the DAC package version string."""
    return __version__
