from __future__ import annotations

from threading import RLock
from typing import Dict, List, Optional

from dac.errors import DuplicateVote
from dac.govtypes import Principal, Vote, VoteKey, ensure_amount


class VoteLedger:
    """
    Write-once record of votes keyed by (proposal_id, voter).

    `cast_vote` is the only insertion path; the existence check and the insert
    share one critical section so a key can never be written twice.
    """

    def __init__(self) -> None:
        self._votes: Dict[VoteKey, Vote] = {}
        self._lock = RLock()

    def cast_vote(
        self,
        proposal_id: int,
        voter: Principal,
        weight: int,
        in_favor: bool,
        *,
        height: Optional[int] = None,
    ) -> Vote:
        weight = ensure_amount(weight, "weight")
        key = VoteKey(int(proposal_id), voter)
        with self._lock:
            if key in self._votes:
                raise DuplicateVote(proposal_id=proposal_id, voter=voter)
            vote = Vote(key=key, weight=weight, in_favor=bool(in_favor), cast_height=height)
            self._votes[key] = vote
            return vote

    def has_voted(self, proposal_id: int, voter: Principal) -> bool:
        return VoteKey(int(proposal_id), voter) in self._votes

    def get_vote(self, proposal_id: int, voter: Principal) -> Optional[Vote]:
        return self._votes.get(VoteKey(int(proposal_id), voter))

    def votes_for(self, proposal_id: int) -> List[Vote]:
        with self._lock:
            return [v for k, v in sorted(self._votes.items()) if k.proposal_id == proposal_id]

    def __len__(self) -> int:
        return len(self._votes)

    # --- load/save ---
    def dump(self) -> List[Dict]:
        with self._lock:
            return [v.to_dict() for _, v in sorted(self._votes.items())]

    @classmethod
    def load(cls, data: List[Dict]) -> "VoteLedger":
        led = cls()
        for d in data:
            v = Vote.from_dict(d)
            if v.key in led._votes:
                raise DuplicateVote(proposal_id=v.key.proposal_id, voter=v.key.voter)
            led._votes[v.key] = v
        return led


__all__ = ["VoteLedger"]
