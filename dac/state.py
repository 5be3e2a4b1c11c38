from __future__ import annotations

"""
Aggregate governance state.

One owned object holds every piece of mutable governance data (treasury,
contributors, proposals, votes) so the engine never touches ambient globals.
It is constructed once when the host starts and lives as long as the host.

`dump()` / `load()` produce and consume a JSON-friendly snapshot; persisting
that snapshot is the host's job.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from dac.proposals.store import ProposalStore
from dac.registry.contributions import ContributionRegistry
from dac.treasury.state import TreasuryError, TreasuryLedger
from dac.votes.ledger import VoteLedger

SNAPSHOT_VERSION = 1


@dataclass
class GovernanceState:
    treasury: TreasuryLedger
    contributions: ContributionRegistry
    proposals: ProposalStore
    votes: VoteLedger = field(default_factory=VoteLedger)

    @classmethod
    def new(cls) -> "GovernanceState":
        treasury = TreasuryLedger()
        return cls(
            treasury=treasury,
            contributions=ContributionRegistry(treasury),
            proposals=ProposalStore(treasury),
            votes=VoteLedger(),
        )

    def dump(self) -> Dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "treasury": self.treasury.dump(),
            "contributors": self.contributions.dump(),
            "proposals": self.proposals.dump(),
            "votes": self.votes.dump(),
        }

    @classmethod
    def load(cls, data: Dict[str, Any]) -> "GovernanceState":
        version = int(data.get("version", SNAPSHOT_VERSION))
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version {version}")
        treasury = TreasuryLedger.load(data.get("treasury", {}))
        st = cls(
            treasury=treasury,
            contributions=ContributionRegistry.load(data.get("contributors", {}), treasury),
            proposals=ProposalStore.load(data.get("proposals", {}), treasury),
            votes=VoteLedger.load(data.get("votes", [])),
        )
        st.assert_consistent()
        return st

    def assert_consistent(self) -> None:
        """
        Cross-component invariants:
          - treasury balance accounting holds
          - executed amounts never exceed donations
          - executed proposals are inactive
          - each tally equals the weight of the votes recorded for it
        """
        self.treasury.assert_consistent()
        if self.treasury.total_credited != self.contributions.total_contributed():
            raise TreasuryError(
                "treasury credits do not match recorded contributions",
                details={
                    "total_credited": self.treasury.total_credited,
                    "total_contributed": self.contributions.total_contributed(),
                },
            )
        for p in self.proposals.proposals():
            if p.is_executed and p.is_active:
                raise ValueError(f"proposal {p.id} is executed but still active")
            cast = self.votes.votes_for(p.id)
            w_for = sum(v.weight for v in cast if v.in_favor)
            w_against = sum(v.weight for v in cast if not v.in_favor)
            if (w_for, w_against) != (p.votes_for, p.votes_against):
                raise ValueError(
                    f"proposal {p.id} tally ({p.votes_for}/{p.votes_against}) "
                    f"does not match recorded votes ({w_for}/{w_against})"
                )


__all__ = ["GovernanceState", "SNAPSHOT_VERSION"]
