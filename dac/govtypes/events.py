from __future__ import annotations

"""
Governance event records.

The engine appends one event per committed state change, giving hosts an
append-only audit trail they can forward to logs, indexers or RPC streams.
Events are plain dataclasses with JSON-serializable fields; `height` is the
caller-supplied ledger height (None when the caller did not provide one).

Events:
  - Donated:          a contributor added funds to the treasury.
  - ProposalCreated:  a disbursement proposal was stored.
  - VoteCast:         a weighted vote was recorded.
  - ProposalExecuted: funds were transferred to the beneficiary.
"""


from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from . import Principal


class EventType(str, Enum):
    DONATED = "Donated"
    PROPOSAL_CREATED = "ProposalCreated"
    VOTE_CAST = "VoteCast"
    PROPOSAL_EXECUTED = "ProposalExecuted"


@dataclass(frozen=True)
class Donated:
    etype: EventType
    contributor: Principal
    amount: int
    total_contributed: int
    balance_after: int
    height: Optional[int] = None

    @staticmethod
    def new(contributor: Principal, amount: int, *, total_contributed: int,
            balance_after: int, height: Optional[int] = None) -> "Donated":
        return Donated(EventType.DONATED, contributor, int(amount),
                       int(total_contributed), int(balance_after), height)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["etype"] = self.etype.value
        d["contributor"] = str(self.contributor)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Donated":
        return Donated(
            etype=EventType(d["etype"]),
            contributor=Principal(str(d["contributor"])),
            amount=int(d["amount"]),
            total_contributed=int(d["total_contributed"]),
            balance_after=int(d["balance_after"]),
            height=d.get("height"),
        )


@dataclass(frozen=True)
class ProposalCreated:
    etype: EventType
    proposal_id: int
    beneficiary: Principal
    amount: int
    end_height: int
    proposer: Optional[Principal] = None
    height: Optional[int] = None

    @staticmethod
    def new(proposal_id: int, beneficiary: Principal, amount: int, *, end_height: int,
            proposer: Optional[Principal] = None, height: Optional[int] = None) -> "ProposalCreated":
        return ProposalCreated(EventType.PROPOSAL_CREATED, int(proposal_id), beneficiary,
                               int(amount), int(end_height), proposer, height)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["etype"] = self.etype.value
        d["beneficiary"] = str(self.beneficiary)
        d["proposer"] = str(self.proposer) if self.proposer is not None else None
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "ProposalCreated":
        return ProposalCreated(
            etype=EventType(d["etype"]),
            proposal_id=int(d["proposal_id"]),
            beneficiary=Principal(str(d["beneficiary"])),
            amount=int(d["amount"]),
            end_height=int(d["end_height"]),
            proposer=Principal(str(d["proposer"])) if d.get("proposer") else None,
            height=d.get("height"),
        )


@dataclass(frozen=True)
class VoteCast:
    etype: EventType
    proposal_id: int
    voter: Principal
    weight: int
    in_favor: bool
    height: Optional[int] = None

    @staticmethod
    def new(proposal_id: int, voter: Principal, weight: int, in_favor: bool,
            height: Optional[int] = None) -> "VoteCast":
        return VoteCast(EventType.VOTE_CAST, int(proposal_id), voter, int(weight),
                        bool(in_favor), height)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["etype"] = self.etype.value
        d["voter"] = str(self.voter)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "VoteCast":
        return VoteCast(
            etype=EventType(d["etype"]),
            proposal_id=int(d["proposal_id"]),
            voter=Principal(str(d["voter"])),
            weight=int(d["weight"]),
            in_favor=bool(d["in_favor"]),
            height=d.get("height"),
        )


@dataclass(frozen=True)
class ProposalExecuted:
    etype: EventType
    proposal_id: int
    beneficiary: Principal
    amount: int
    balance_after: int
    transfer_ref: Optional[str] = None
    height: Optional[int] = None

    @staticmethod
    def new(proposal_id: int, beneficiary: Principal, amount: int, *, balance_after: int,
            transfer_ref: Optional[str] = None, height: Optional[int] = None) -> "ProposalExecuted":
        return ProposalExecuted(EventType.PROPOSAL_EXECUTED, int(proposal_id), beneficiary,
                                int(amount), int(balance_after), transfer_ref, height)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["etype"] = self.etype.value
        d["beneficiary"] = str(self.beneficiary)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "ProposalExecuted":
        return ProposalExecuted(
            etype=EventType(d["etype"]),
            proposal_id=int(d["proposal_id"]),
            beneficiary=Principal(str(d["beneficiary"])),
            amount=int(d["amount"]),
            balance_after=int(d["balance_after"]),
            transfer_ref=d.get("transfer_ref"),
            height=d.get("height"),
        )


GovEvent = Union[Donated, ProposalCreated, VoteCast, ProposalExecuted]


def serialize_event(ev: GovEvent) -> Dict[str, Any]:
    return ev.to_dict()


def deserialize_event(d: Mapping[str, Any]) -> GovEvent:
    """Instantiate a concrete event from a dict with an 'etype' discriminator."""
    etype = EventType(d["etype"])
    if etype is EventType.DONATED:
        return Donated.from_dict(d)
    if etype is EventType.PROPOSAL_CREATED:
        return ProposalCreated.from_dict(d)
    if etype is EventType.VOTE_CAST:
        return VoteCast.from_dict(d)
    if etype is EventType.PROPOSAL_EXECUTED:
        return ProposalExecuted.from_dict(d)
    raise ValueError(f"Unknown event etype: {etype!r}")


__all__ = [
    "EventType",
    "Donated",
    "ProposalCreated",
    "VoteCast",
    "ProposalExecuted",
    "GovEvent",
    "serialize_event",
    "deserialize_event",
]
