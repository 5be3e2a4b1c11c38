from __future__ import annotations

"""
Proposal store: id allocation, records and lifecycle flags.

The store checks the requested amount against the treasury balance at
creation time only. Funds are not reserved, so a later execution can still
find the treasury drained; the engine re-checks the balance when executing.

`apply_vote` trusts its caller (the engine) to have validated the voting
window and duplicate votes; it only performs the tally arithmetic.
"""

from dataclasses import replace
from threading import RLock
from typing import Dict, List, Optional

from dac.errors import AlreadyExecuted, InsufficientTreasuryFunds, NotFound
from dac.govtypes import Principal, Proposal, ensure_amount, ensure_height
from dac.treasury.state import TreasuryLedger


class ProposalStore:
    def __init__(self, treasury: TreasuryLedger) -> None:
        self._treasury = treasury
        self._proposals: Dict[int, Proposal] = {}
        self._last_id = 0
        self._lock = RLock()

    @property
    def last_id(self) -> int:
        return self._last_id

    def create(
        self,
        beneficiary: Principal,
        amount: int,
        description: str,
        duration_blocks: int,
        current_height: int,
        *,
        proposer: Optional[Principal] = None,
    ) -> int:
        amount = ensure_amount(amount)
        duration_blocks = ensure_height(duration_blocks, "duration_blocks")
        current_height = ensure_height(current_height, "current_height")
        with self._lock:
            balance = self._treasury.balance
            if amount > balance:
                raise InsufficientTreasuryFunds(requested=amount, balance=balance)
            pid = self._last_id + 1
            self._proposals[pid] = Proposal(
                id=pid,
                beneficiary=beneficiary,
                amount=amount,
                description=description,
                end_height=current_height + duration_blocks,
                proposer=proposer,
                created_height=current_height,
            )
            self._last_id = pid
            return pid

    def get(self, proposal_id: int) -> Optional[Proposal]:
        p = self._proposals.get(proposal_id)
        return replace(p) if p is not None else None

    def _require(self, proposal_id: int) -> Proposal:
        p = self._proposals.get(proposal_id)
        if p is None:
            raise NotFound(proposal_id=proposal_id)
        return p

    def apply_vote(self, proposal_id: int, weight: int, in_favor: bool) -> Proposal:
        weight = ensure_amount(weight, "weight")
        with self._lock:
            p = self._require(proposal_id)
            if in_favor:
                p.votes_for += weight
            else:
                p.votes_against += weight
            p.voter_count += 1
            return replace(p)

    def mark_executed(self, proposal_id: int, *, height: Optional[int] = None) -> Proposal:
        with self._lock:
            p = self._require(proposal_id)
            if p.is_executed:
                raise AlreadyExecuted(proposal_id=proposal_id)
            p.is_active = False
            p.is_executed = True
            p.executed_height = height
            return replace(p)

    def proposals(self) -> List[Proposal]:
        with self._lock:
            return [replace(self._proposals[k]) for k in sorted(self._proposals)]

    def __len__(self) -> int:
        return len(self._proposals)

    # --- load/save ---
    def dump(self) -> Dict:
        with self._lock:
            return {
                "last_id": self._last_id,
                "proposals": [self._proposals[k].to_dict() for k in sorted(self._proposals)],
            }

    @classmethod
    def load(cls, data: Dict, treasury: TreasuryLedger) -> "ProposalStore":
        store = cls(treasury)
        for d in data.get("proposals", []):
            p = Proposal.from_dict(d)
            store._proposals[p.id] = p
        store._last_id = max(int(data.get("last_id", 0)), max(store._proposals, default=0))
        return store


__all__ = ["ProposalStore"]
