from __future__ import annotations
# dac/errors.py
"""
Error types for the Decentralized Autonomous Charity (DAC) governance core.

Every failure the engine can report is a subclass of DACError. Errors carry a
stable string `code` (for logs/RPC), a numeric `err_code` that matches the
on-chain contract's error constants, a human message and a small `details`
mapping. None of them are fatal: the engine stays usable after any of these is
raised and no partial mutation is committed.

Numeric codes (contract-compatible):
  100 invalid amount / request
  101 proposal not found
  102 no voting power / proposal rejected
  103 insufficient (treasury) funds
  104 voting still open
  105 voting closed / already executed
  106 duplicate vote
  107 transfer failed
"""


from typing import Any, Dict, Mapping, Optional
import json


class DACError(Exception):
    """Base class for DAC domain errors."""

    code: str = "DAC_ERROR"
    err_code: int = 100

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "err_code": self.err_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            try:
                packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"))
            except (TypeError, ValueError):
                packed = str(self.details)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


class InvalidAmount(DACError):
    """An amount was negative, zero where a positive value is required, or not an integer."""
    code = "DAC_INVALID_AMOUNT"
    err_code = 100

    def __init__(
        self,
        message: str = "invalid amount",
        *,
        amount: Any = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if amount is not None:
            d.setdefault("amount", amount if isinstance(amount, int) else repr(amount))
        super().__init__(message, details=d)


class InvalidRequest(DACError):
    """A request is malformed: empty principal, oversized description, bad duration."""
    code = "DAC_INVALID_REQUEST"
    err_code = 100


class NotFound(DACError):
    """The referenced proposal does not exist."""
    code = "DAC_NOT_FOUND"
    err_code = 101

    def __init__(
        self,
        *,
        proposal_id: int,
        message: str = "proposal not found",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["proposal_id"] = int(proposal_id)
        super().__init__(message, details=d)


class NoVotingPower(DACError):
    """The voter never contributed and therefore has zero voting power."""
    code = "DAC_NO_VOTING_POWER"
    err_code = 102

    def __init__(
        self,
        *,
        voter: str,
        message: str = "voter has no voting power",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["voter"] = str(voter)
        super().__init__(message, details=d)


class ProposalRejected(DACError):
    """The proposal did not reach a strict majority (ties reject)."""
    code = "DAC_PROPOSAL_REJECTED"
    err_code = 102

    def __init__(
        self,
        *,
        proposal_id: int,
        votes_for: int,
        votes_against: int,
        message: str = "proposal rejected",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({
            "proposal_id": int(proposal_id),
            "votes_for": int(votes_for),
            "votes_against": int(votes_against),
        })
        super().__init__(message, details=d)


class InsufficientFunds(DACError):
    """A treasury debit exceeds the available balance."""
    code = "DAC_INSUFFICIENT_FUNDS"
    err_code = 103

    def __init__(
        self,
        *,
        requested: int,
        balance: int,
        message: str = "insufficient funds",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"requested": int(requested), "balance": int(balance)})
        super().__init__(message, details=d)


class InsufficientTreasuryFunds(DACError):
    """A proposal asks for more than the treasury currently holds."""
    code = "DAC_INSUFFICIENT_TREASURY_FUNDS"
    err_code = 103

    def __init__(
        self,
        *,
        requested: int,
        balance: int,
        proposal_id: Optional[int] = None,
        message: str = "insufficient treasury funds",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"requested": int(requested), "balance": int(balance)})
        if proposal_id is not None:
            d["proposal_id"] = int(proposal_id)
        super().__init__(message, details=d)


class VotingStillOpen(DACError):
    """Execution attempted while the voting window is still open."""
    code = "DAC_VOTING_STILL_OPEN"
    err_code = 104

    def __init__(
        self,
        *,
        proposal_id: int,
        end_height: int,
        current_height: int,
        message: str = "voting still open",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({
            "proposal_id": int(proposal_id),
            "end_height": int(end_height),
            "current_height": int(current_height),
        })
        super().__init__(message, details=d)


class VotingClosed(DACError):
    """A vote arrived after the window closed or on an inactive proposal."""
    code = "DAC_VOTING_CLOSED"
    err_code = 105

    def __init__(
        self,
        *,
        proposal_id: int,
        end_height: Optional[int] = None,
        current_height: Optional[int] = None,
        message: str = "voting closed",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["proposal_id"] = int(proposal_id)
        if end_height is not None:
            d["end_height"] = int(end_height)
        if current_height is not None:
            d["current_height"] = int(current_height)
        super().__init__(message, details=d)


class AlreadyExecuted(DACError):
    """The proposal has already been executed; execution is irreversible."""
    code = "DAC_ALREADY_EXECUTED"
    err_code = 105

    def __init__(
        self,
        *,
        proposal_id: int,
        message: str = "proposal already executed",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["proposal_id"] = int(proposal_id)
        super().__init__(message, details=d)


class DuplicateVote(DACError):
    """The voter already cast a vote on this proposal."""
    code = "DAC_DUPLICATE_VOTE"
    err_code = 106

    def __init__(
        self,
        *,
        proposal_id: int,
        voter: str,
        message: str = "duplicate vote",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"proposal_id": int(proposal_id), "voter": str(voter)})
        super().__init__(message, details=d)


class TransferError(DACError):
    """The external payment primitive refused or failed the disbursement."""
    code = "DAC_TRANSFER_FAILED"
    err_code = 107

    def __init__(
        self,
        message: str = "transfer failed",
        *,
        to: Optional[str] = None,
        amount: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if to is not None:
            d["to"] = str(to)
        if amount is not None:
            d["amount"] = int(amount)
        super().__init__(message, details=d)


__all__ = [
    "DACError",
    "InvalidAmount",
    "InvalidRequest",
    "NotFound",
    "NoVotingPower",
    "ProposalRejected",
    "InsufficientFunds",
    "InsufficientTreasuryFunds",
    "VotingStillOpen",
    "VotingClosed",
    "AlreadyExecuted",
    "DuplicateVote",
    "TransferError",
]
