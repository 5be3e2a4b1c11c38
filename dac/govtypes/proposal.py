from __future__ import annotations

"""
Proposal record and its derived lifecycle status.

A proposal is created active, collects weighted votes while
`current_height <= end_height`, and may be executed once the window has closed
if it holds a strict majority. Records are never deleted.

Status is derived, not stored:

  ACTIVE    window still open (height <= end_height), not executed
  PASSED    window closed, votes_for > votes_against, not yet executed
  FAILED    window closed, votes_for <= votes_against (ties fail); inert forever
  EXECUTED  funds disbursed; terminal
"""


from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from . import Principal


class ProposalStatus(str, Enum):
    ACTIVE = "active"
    PASSED = "passed"
    FAILED = "failed"
    EXECUTED = "executed"


@dataclass
class Proposal:
    id: int
    beneficiary: Principal
    amount: int
    description: str
    end_height: int
    votes_for: int = 0
    votes_against: int = 0
    is_active: bool = True
    is_executed: bool = False
    proposer: Optional[Principal] = None
    created_height: Optional[int] = None
    executed_height: Optional[int] = None
    voter_count: int = 0

    @property
    def total_votes(self) -> int:
        return self.votes_for + self.votes_against

    def has_majority(self) -> bool:
        return self.votes_for > self.votes_against

    def window_open(self, current_height: int) -> bool:
        return self.is_active and current_height <= self.end_height

    def status(self, current_height: int) -> ProposalStatus:
        if self.is_executed:
            return ProposalStatus.EXECUTED
        if current_height <= self.end_height:
            return ProposalStatus.ACTIVE
        return ProposalStatus.PASSED if self.has_majority() else ProposalStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["beneficiary"] = str(self.beneficiary)
        d["proposer"] = str(self.proposer) if self.proposer is not None else None
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Proposal":
        p = Proposal(
            id=int(d["id"]),
            beneficiary=Principal(d["beneficiary"]),
            amount=int(d["amount"]),
            description=str(d.get("description", "")),
            end_height=int(d["end_height"]),
            votes_for=int(d.get("votes_for", 0)),
            votes_against=int(d.get("votes_against", 0)),
            is_active=bool(d.get("is_active", True)),
            is_executed=bool(d.get("is_executed", False)),
            proposer=Principal(d["proposer"]) if d.get("proposer") else None,
            created_height=d.get("created_height"),
            executed_height=d.get("executed_height"),
            voter_count=int(d.get("voter_count", 0)),
        )
        if p.is_executed and p.is_active:
            raise ValueError(f"proposal {p.id}: executed proposals cannot be active")
        return p


__all__ = ["Proposal", "ProposalStatus"]
