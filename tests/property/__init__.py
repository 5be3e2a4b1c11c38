# -*- coding: utf-8 -*-
"""
Hypothesis settings for the governance property suite.

Each example builds a fresh engine and replays an operation history against
it, so example cost grows with history length. Profiles trade example count
against history length:

  dev    local default: quick feedback, short histories
  ci     deterministic, more examples, failing blobs printed for replay
  soak   long histories, many examples; run on demand

Pick one with DAC_HYPOTHESIS_PROFILE (CI=true selects "ci").
"""
from __future__ import annotations

import os
from typing import Dict

from hypothesis import HealthCheck, Phase, settings

# profile -> longest operation history a single example replays
MAX_HISTORY: Dict[str, int] = {"dev": 40, "ci": 60, "soak": 200}

_common = dict(deadline=None, suppress_health_check=[HealthCheck.too_slow])

settings.register_profile("dev", max_examples=60, **_common)
settings.register_profile("ci", max_examples=250, derandomize=True, print_blob=True, **_common)
settings.register_profile(
    "soak",
    max_examples=2_000,
    phases=[Phase.generate, Phase.target, Phase.shrink],
    **_common,
)

PROFILE = os.getenv("DAC_HYPOTHESIS_PROFILE") or ("ci" if os.getenv("CI") else "dev")
if PROFILE not in MAX_HISTORY:
    raise ValueError(f"unknown hypothesis profile {PROFILE!r}; expected one of {sorted(MAX_HISTORY)}")
settings.load_profile(PROFILE)


def max_history() -> int:
    """Longest operation history to generate under the active profile."""
    return MAX_HISTORY[PROFILE]
