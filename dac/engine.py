from __future__ import annotations

"""
DAC Governance Engine
---------------------

Orchestrates donate → propose → vote → execute over one owned
`GovernanceState`. This is the only component hosts call directly.

Lifecycle of a proposal
~~~~~~~~~~~~~~~~~~~~~~~
  ACTIVE    votes accepted while current_height <= end_height
  PASSED    window closed with votes_for > votes_against; executable
  FAILED    window closed without a strict majority (a tie fails); inert
  EXECUTED  treasury debited and beneficiary paid; terminal

Heights are supplied by the caller on every time-sensitive operation, so the
engine is deterministic and needs no clock.

Funds are checked, not reserved, when a proposal is created. Execution checks
the balance again, so a proposal that passed its vote can still fail with
InsufficientTreasuryFunds when an earlier execution drained the treasury.

Concurrency: a single `threading.RLock` serializes every mutating operation.
Each operation validates everything before its first mutation; the only
post-mutation failure (the payout primitive raising) is undone
by refunding the debit, so a failed call never leaves partial state behind.
"""

import logging
from threading import RLock
from typing import List, Optional, Tuple

from dac import metrics
from dac.config import DACConfig
from dac.errors import (AlreadyExecuted, DACError, InsufficientTreasuryFunds,
                        InvalidAmount, InvalidRequest, NoVotingPower, NotFound,
                        ProposalRejected, TransferError, VotingClosed,
                        VotingStillOpen)
from dac.govtypes import (Contributor, Principal, Proposal, ProposalStatus,
                          ensure_amount, ensure_height, ensure_principal)
from dac.govtypes.events import (Donated, GovEvent, ProposalCreated,
                                 ProposalExecuted, VoteCast, deserialize_event,
                                 serialize_event)
from dac.state import GovernanceState
from dac.treasury.transfer import InMemoryPayments, PaymentTransfer

log = logging.getLogger(__name__)


class GovernanceEngine:
    """
    Example:
        engine = GovernanceEngine()
        engine.donate("alice", 1_000)
        pid = engine.propose("shelter", 500, "winter beds", 100, current_height=100)
        engine.vote("alice", pid, True, current_height=150)
        engine.execute(pid, current_height=201)
    """

    def __init__(
        self,
        *,
        payments: Optional[PaymentTransfer] = None,
        config: Optional[DACConfig] = None,
        state: Optional[GovernanceState] = None,
    ) -> None:
        self.config = config or DACConfig()
        self.config.validate()
        self.state = state or GovernanceState.new()
        self.payments: PaymentTransfer = payments if payments is not None else InMemoryPayments()
        self._events: List[GovEvent] = []
        self._lock = RLock()

    @classmethod
    def from_snapshot(
        cls,
        data: dict,
        *,
        payments: Optional[PaymentTransfer] = None,
        config: Optional[DACConfig] = None,
    ) -> "GovernanceEngine":
        engine = cls(payments=payments, config=config, state=GovernanceState.load(data))
        engine._events = [deserialize_event(d) for d in data.get("events", [])]
        return engine

    def dump(self) -> dict:
        """State snapshot plus the event log, JSON-friendly."""
        with self._lock:
            out = self.state.dump()
            out["events"] = [serialize_event(ev) for ev in self._events]
            return out

    # --- donate ---

    def donate(self, contributor: Principal, amount: int, *, height: Optional[int] = None) -> Contributor:
        with metrics.time_operation("donate"), self._lock:
            try:
                who = ensure_principal(contributor, "contributor")
                amount = ensure_amount(amount)
                if height is not None:
                    height = ensure_height(height)
                min_donation = self.config.donations.min_donation
                if amount < min_donation:
                    raise InvalidAmount(
                        f"donation must be at least {min_donation}",
                        amount=amount,
                        details={"min_donation": min_donation},
                    )
            except DACError:
                metrics.record_donation_rejected()
                raise

            rec = self.state.contributions.record_contribution(who, amount, height=height)
            balance = self.state.treasury.balance
            self._events.append(Donated.new(
                who, amount, total_contributed=rec.total_contributed,
                balance_after=balance, height=height,
            ))
            metrics.record_donation(amount, balance)
            log.info("donate: contributor=%s amount=%d total=%d balance=%d",
                     who, amount, rec.total_contributed, balance)
            return rec

    # --- propose ---

    def _check_proposal_shape(self, beneficiary, amount, description, duration_blocks, current_height):
        rules = self.config.proposals
        who = ensure_principal(beneficiary, "beneficiary")
        amount = ensure_amount(amount, positive=True)
        if not isinstance(description, str):
            raise InvalidRequest("description must be a string", details={"description": repr(description)})
        if len(description) > rules.max_description_len:
            raise InvalidRequest(
                "description too long",
                details={"length": len(description), "max": rules.max_description_len},
            )
        duration_blocks = ensure_height(duration_blocks, "duration_blocks")
        if duration_blocks < rules.min_duration_blocks or (
            rules.max_duration_blocks is not None and duration_blocks > rules.max_duration_blocks
        ):
            raise InvalidRequest(
                "duration_blocks out of range",
                details={
                    "duration_blocks": duration_blocks,
                    "min": rules.min_duration_blocks,
                    "max": rules.max_duration_blocks,
                },
            )
        current_height = ensure_height(current_height, "current_height")
        return who, amount, description, duration_blocks, current_height

    def propose(
        self,
        beneficiary: Principal,
        amount: int,
        description: str,
        duration_blocks: int,
        current_height: int,
        *,
        proposer: Optional[Principal] = None,
    ) -> int:
        with metrics.time_operation("propose"), self._lock:
            try:
                who, amount, description, duration_blocks, current_height = self._check_proposal_shape(
                    beneficiary, amount, description, duration_blocks, current_height
                )
                if proposer is not None:
                    proposer = ensure_principal(proposer, "proposer")
                pid = self.state.proposals.create(
                    who, amount, description, duration_blocks, current_height, proposer=proposer
                )
            except DACError as e:
                metrics.record_proposal(e.code)
                raise

            end_height = current_height + duration_blocks
            self._events.append(ProposalCreated.new(
                pid, who, amount, end_height=end_height, proposer=proposer, height=current_height,
            ))
            metrics.record_proposal()
            log.info("propose: id=%d beneficiary=%s amount=%d end_height=%d",
                     pid, who, amount, end_height)
            return pid

    # --- vote ---

    def vote(self, voter: Principal, proposal_id: int, in_favor: bool, current_height: int) -> int:
        """Record a weighted vote and return the weight applied."""
        with metrics.time_operation("vote"), self._lock:
            try:
                current_height = ensure_height(current_height, "current_height")
                voter = ensure_principal(voter, "voter")
                p = self.state.proposals.get(proposal_id)
                if p is None:
                    raise NotFound(proposal_id=proposal_id)
                if not p.window_open(current_height):
                    raise VotingClosed(
                        proposal_id=proposal_id,
                        end_height=p.end_height,
                        current_height=current_height,
                    )
                weight = self.state.contributions.voting_power_of(voter)
                if weight == 0:
                    raise NoVotingPower(voter=voter)
                self.state.votes.cast_vote(
                    proposal_id, voter, weight, in_favor, height=current_height
                )
            except DACError as e:
                metrics.record_vote_rejected(e.code)
                raise

            self.state.proposals.apply_vote(proposal_id, weight, in_favor)
            self._events.append(VoteCast.new(proposal_id, voter, weight, in_favor, current_height))
            metrics.record_vote(in_favor)
            log.debug("vote: id=%d voter=%s weight=%d in_favor=%s",
                      proposal_id, voter, weight, in_favor)
            return weight

    # --- execute ---

    def execute(self, proposal_id: int, current_height: int) -> Proposal:
        with metrics.time_operation("execute"), self._lock:
            try:
                current_height = ensure_height(current_height, "current_height")
                p = self.state.proposals.get(proposal_id)
                if p is None:
                    raise NotFound(proposal_id=proposal_id)
                if p.is_executed:
                    raise AlreadyExecuted(proposal_id=proposal_id)
                if current_height <= p.end_height:
                    raise VotingStillOpen(
                        proposal_id=proposal_id,
                        end_height=p.end_height,
                        current_height=current_height,
                    )
                if not p.has_majority():
                    raise ProposalRejected(
                        proposal_id=proposal_id,
                        votes_for=p.votes_for,
                        votes_against=p.votes_against,
                    )
                treasury = self.state.treasury
                if not treasury.can_cover(p.amount):
                    raise InsufficientTreasuryFunds(
                        requested=p.amount,
                        balance=treasury.balance,
                        proposal_id=proposal_id,
                    )

                entry = treasury.debit(p.amount, height=current_height, reason=f"proposal:{proposal_id}")
                try:
                    ref = self.payments.transfer(
                        Principal(self.config.treasury.principal), p.beneficiary, p.amount
                    )
                except Exception as e:
                    treasury.refund(entry, reason=f"rollback:proposal:{proposal_id}")
                    log.warning("execute: transfer failed, debit rolled back id=%d beneficiary=%s amount=%d: %s",
                                proposal_id, p.beneficiary, p.amount, e)
                    if isinstance(e, TransferError):
                        raise
                    raise TransferError(
                        f"payment backend error: {type(e).__name__}",
                        to=p.beneficiary,
                        amount=p.amount,
                    ) from e
            except DACError as e:
                metrics.record_execution_rejected(e.code)
                raise

            done = self.state.proposals.mark_executed(proposal_id, height=current_height)
            balance = treasury.balance
            self._events.append(ProposalExecuted.new(
                proposal_id, p.beneficiary, p.amount,
                balance_after=balance, transfer_ref=ref, height=current_height,
            ))
            metrics.record_execution(p.amount, balance)
            log.info("execute: id=%d beneficiary=%s amount=%d balance=%d",
                     proposal_id, p.beneficiary, p.amount, balance)
            return done

    # --- read-only views ---

    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        return self.state.proposals.get(proposal_id)

    def proposal_status(self, proposal_id: int, current_height: int) -> ProposalStatus:
        p = self.state.proposals.get(proposal_id)
        if p is None:
            raise NotFound(proposal_id=proposal_id)
        return p.status(current_height)

    def get_contributor(self, contributor: Principal) -> Optional[Contributor]:
        return self.state.contributions.get(contributor)

    def voting_power_of(self, contributor: Principal) -> int:
        return self.state.contributions.voting_power_of(contributor)

    def has_voted(self, proposal_id: int, voter: Principal) -> bool:
        return self.state.votes.has_voted(proposal_id, voter)

    @property
    def balance(self) -> int:
        return self.state.treasury.balance

    def events(self) -> Tuple[GovEvent, ...]:
        return tuple(self._events)


__all__ = ["GovernanceEngine"]
