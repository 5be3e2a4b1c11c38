from __future__ import annotations

"""
dac.treasury.transfer
=====================

Contract for the external **payment transfer primitive** the engine calls when
a proposal executes, plus a small in-memory implementation.

Design goals
------------
- Transport-agnostic: the hosting ledger injects any object with a
  `transfer(sender, to, amount)` method. The engine never signs or broadcasts
  anything itself.
- Failures surface as `TransferError`; the engine rolls back its own debit when
  the primitive raises, so the treasury never loses funds to a failed payout.
- The return value is an optional opaque reference (tx hash, receipt id) that
  is recorded on the ProposalExecuted event.
"""

import hashlib
from dataclasses import dataclass
from threading import RLock
from typing import Dict, List, Optional, Protocol, runtime_checkable

from dac.errors import TransferError
from dac.govtypes import Principal


@runtime_checkable
class PaymentTransfer(Protocol):
    """Minimal payout surface supplied by the hosting ledger."""

    def transfer(self, sender: Principal, to: Principal, amount: int) -> Optional[str]:
        """Move `amount` from the treasury account to `to`. Raise TransferError on failure."""


@dataclass(frozen=True)
class TransferRecord:
    seq: int
    sender: Principal
    to: Principal
    amount: int
    ref: str

    def to_obj(self) -> Dict:
        return {
            "seq": self.seq,
            "from": str(self.sender),
            "to": str(self.to),
            "amount": int(self.amount),
            "ref": self.ref,
        }


def _transfer_ref(seq: int, sender: str, to: str, amount: int) -> str:
    # Length-prefixed fields keep the digest unambiguous.
    h = hashlib.sha3_256()
    for part in (str(seq), sender, to, str(amount)):
        raw = part.encode("utf-8")
        h.update(len(raw).to_bytes(4, "big"))
        h.update(raw)
    return h.hexdigest()


class InMemoryPayments:
    """
    Records transfers and per-recipient received totals.

    Set `fail_next` (or pass `refuse={principal, ...}`) to make transfers raise
    TransferError, which is how dry runs and tests exercise rollback paths.
    """

    def __init__(self, *, refuse: Optional[set] = None) -> None:
        self._records: List[TransferRecord] = []
        self._received: Dict[str, int] = {}
        self._refuse = set(refuse or ())
        self.fail_next = False
        self._lock = RLock()

    def transfer(self, sender: Principal, to: Principal, amount: int) -> str:
        if amount <= 0:
            raise TransferError("amount must be positive", to=to, amount=amount)
        with self._lock:
            if self.fail_next:
                self.fail_next = False
                raise TransferError("transfer rejected by payment backend", to=to, amount=amount)
            if str(to) in self._refuse:
                raise TransferError("recipient refused", to=to, amount=amount)
            seq = len(self._records) + 1
            ref = _transfer_ref(seq, str(sender), str(to), int(amount))
            self._records.append(TransferRecord(seq, sender, to, int(amount), ref))
            self._received[str(to)] = self._received.get(str(to), 0) + int(amount)
            return ref

    def received(self, who: Principal) -> int:
        return self._received.get(str(who), 0)

    def records(self) -> List[TransferRecord]:
        return list(self._records)


__all__ = ["PaymentTransfer", "TransferRecord", "InMemoryPayments"]
