from __future__ import annotations

"""
Package version.

BASE_VERSION is the single source of truth: pyproject.toml reads it as the
distribution version. A deployment can stamp a build label through
DAC_VERSION, which then becomes `__version__` (e.g. "0.1.0+charity.7").
"""

import os

BASE_VERSION = "0.1.0"


def build_version() -> str:
    return os.getenv("DAC_VERSION") or BASE_VERSION


__version__ = build_version()


def get_version() -> str:
    return __version__


__all__ = ["__version__", "get_version", "build_version", "BASE_VERSION"]
