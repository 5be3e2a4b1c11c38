from __future__ import annotations

"""
Lightweight shared types for the DAC governance core.

These are intentionally minimal so they can be imported from runtime code and
type-checkers without pulling in the stores or the engine.

Conventions
-----------
- Principals are opaque, non-empty strings compared by equality.
- Monetary values are non-negative integers in the treasury's base unit.
- Heights come from the hosting ledger and are non-negative integers.
"""


from typing import Any, NewType

from dac.errors import InvalidAmount, InvalidRequest

# ────────────────────────────────────────────────────────────────────────────────
# Identifiers & scalars
# ────────────────────────────────────────────────────────────────────────────────

Principal = NewType("Principal", str)  # contributor / voter / beneficiary identity
ProposalId = NewType("ProposalId", int)  # monotonic, first proposal is 1
Amount = int
Height = int


def is_uint(x: Any) -> bool:
    """True for non-negative ints (bools are rejected)."""
    return isinstance(x, int) and not isinstance(x, bool) and x >= 0


def ensure_amount(x: Any, name: str = "amount", *, positive: bool = False) -> Amount:
    if not is_uint(x):
        raise InvalidAmount(f"{name} must be a non-negative integer", amount=x)
    if positive and x == 0:
        raise InvalidAmount(f"{name} must be positive", amount=x)
    return int(x)


def ensure_height(x: Any, name: str = "height") -> Height:
    if not is_uint(x):
        raise InvalidRequest(f"{name} must be a non-negative integer", details={name: repr(x)})
    return int(x)


def ensure_principal(x: Any, name: str = "principal") -> Principal:
    if not isinstance(x, str) or not x.strip():
        raise InvalidRequest(f"{name} must be a non-empty string", details={name: repr(x)})
    return Principal(x)


from .contributor import Contributor  # noqa: E402
from .proposal import Proposal, ProposalStatus  # noqa: E402
from .vote import Vote, VoteKey  # noqa: E402

__all__ = [
    "Principal",
    "ProposalId",
    "Amount",
    "Height",
    "is_uint",
    "ensure_amount",
    "ensure_height",
    "ensure_principal",
    "Contributor",
    "Proposal",
    "ProposalStatus",
    "Vote",
    "VoteKey",
]
