from __future__ import annotations
"""
DAC test suite package.

Tiny helpers shared across the DAC tests. Heights are arbitrary but fixed so
scenarios read the same way the contract tests do: proposals are created at
height 100 and windows are measured from there.
"""


CREATE_HEIGHT: int = 100


def funded(engine, **donations: int):
    """Donate `amount` for each `name=amount` pair and return the engine."""
    for who, amount in donations.items():
        engine.donate(who, amount)
    return engine


__all__ = ["CREATE_HEIGHT", "funded"]
