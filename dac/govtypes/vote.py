from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import Principal


@dataclass(frozen=True, order=True)
class VoteKey:
    """Composite identity of a vote: one per (proposal, voter)."""

    proposal_id: int
    voter: Principal

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.proposal_id}/{self.voter}"


@dataclass(frozen=True)
class Vote:
    """Immutable vote record. `weight` is the voter's power when the vote was cast."""

    key: VoteKey
    weight: int
    in_favor: bool
    cast_height: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposal_id": int(self.key.proposal_id),
            "voter": str(self.key.voter),
            "weight": int(self.weight),
            "in_favor": bool(self.in_favor),
            "cast_height": self.cast_height,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Vote":
        return Vote(
            key=VoteKey(int(d["proposal_id"]), Principal(d["voter"])),
            weight=int(d["weight"]),
            in_favor=bool(d["in_favor"]),
            cast_height=d.get("cast_height"),
        )


__all__ = ["VoteKey", "Vote"]
