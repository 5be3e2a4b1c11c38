from __future__ import annotations

"""
DAC Treasury: pooled balance ledger
------------------------------------

Tracks the single, process-wide treasury balance that donations fill and
executed proposals drain. Alongside the scalar balance it keeps lifetime
`total_credited` / `total_debited` counters and an append-only journal so that
the accounting invariants can be audited at any time:

  • balance >= 0
  • balance == total_credited - total_debited
  • total_debited <= total_credited

Amounts are integer base units (no floats). `debit` performs its sufficiency
check and the subtraction inside one critical section; a coarse
`threading.RLock` protects every mutating method.

The ledger is storage-agnostic: `dump()` produces a JSON-friendly dict and
`load()` restores it. Persistence belongs to the hosting runtime.
"""

from dataclasses import asdict, dataclass
from threading import RLock
from typing import Dict, Iterable, List, Literal, Optional

from dac.errors import DACError, InsufficientFunds
from dac.govtypes import Amount, Height, ensure_amount

OpName = Literal["credit", "debit"]


class TreasuryError(DACError):
    """Raised when the treasury's own invariants are found broken."""
    code = "DAC_TREASURY_ERROR"


@dataclass(frozen=True)
class JournalEntry:
    seq: int
    op: OpName
    amount: Amount
    balance_after: Amount
    height: Optional[Height] = None
    reason: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict) -> "JournalEntry":
        return JournalEntry(
            seq=int(d["seq"]),
            op=d["op"],
            amount=int(d["amount"]),
            balance_after=int(d["balance_after"]),
            height=d.get("height"),
            reason=d.get("reason", ""),
        )


class TreasuryLedger:
    """
    In-memory treasury balance with an audit journal.

    `credit` never fails for a valid amount; `debit` raises InsufficientFunds
    rather than letting the balance go negative.
    """

    def __init__(self) -> None:
        self._balance: Amount = 0
        self._credited: Amount = 0
        self._debited: Amount = 0
        self._journal: List[JournalEntry] = []
        self._lock = RLock()

    # --- load/save ---

    def dump(self) -> Dict:
        with self._lock:
            return {
                "balance": self._balance,
                "total_credited": self._credited,
                "total_debited": self._debited,
                "journal": [je.to_dict() for je in self._journal],
            }

    @classmethod
    def load(cls, data: Dict) -> "TreasuryLedger":
        led = cls()
        led._balance = int(data.get("balance", 0))
        led._credited = int(data.get("total_credited", led._balance))
        led._debited = int(data.get("total_debited", 0))
        led._journal = [JournalEntry.from_dict(d) for d in data.get("journal", [])]
        led.assert_consistent()
        return led

    # --- introspection ---

    @property
    def balance(self) -> Amount:
        return self._balance

    @property
    def total_credited(self) -> Amount:
        return self._credited

    @property
    def total_debited(self) -> Amount:
        return self._debited

    def can_cover(self, amount: Amount) -> bool:
        return self._balance >= amount

    def journal(self) -> Iterable[JournalEntry]:
        return tuple(self._journal)

    # --- mutations (all locked) ---

    def _record(self, op: OpName, amount: Amount, height: Optional[Height], reason: str) -> JournalEntry:
        je = JournalEntry(
            seq=len(self._journal) + 1,
            op=op,
            amount=amount,
            balance_after=self._balance,
            height=height,
            reason=reason,
        )
        self._journal.append(je)
        return je

    def credit(
        self,
        amount: Amount,
        *,
        height: Optional[Height] = None,
        reason: str = "donation",
    ) -> JournalEntry:
        amount = ensure_amount(amount)
        with self._lock:
            self._balance += amount
            self._credited += amount
            return self._record("credit", amount, height, reason)

    def debit(
        self,
        amount: Amount,
        *,
        height: Optional[Height] = None,
        reason: str = "disbursement",
    ) -> JournalEntry:
        amount = ensure_amount(amount)
        with self._lock:
            if amount > self._balance:
                raise InsufficientFunds(requested=amount, balance=self._balance)
            self._balance -= amount
            self._debited += amount
            return self._record("debit", amount, height, reason)

    def refund(
        self,
        entry: JournalEntry,
        *,
        reason: str = "rollback",
    ) -> JournalEntry:
        """
        Reverse a debit whose downstream effect failed. The debit stays in the
        journal; the reversal is recorded as a credit that also unwinds the
        lifetime debit counter, so donations are not inflated.
        """
        if entry.op != "debit":
            raise TreasuryError("only debits can be refunded", details={"seq": entry.seq})
        with self._lock:
            self._balance += entry.amount
            self._debited -= entry.amount
            return self._record("credit", entry.amount, entry.height, reason)

    # --- utilities ---

    def assert_consistent(self) -> None:
        with self._lock:
            if self._balance < 0:
                raise TreasuryError(f"negative treasury balance: {self._balance}")
            if self._debited > self._credited:
                raise TreasuryError(
                    f"debited {self._debited} exceeds credited {self._credited}"
                )
            if self._balance != self._credited - self._debited:
                raise TreasuryError(
                    f"balance {self._balance} != credited {self._credited} - debited {self._debited}"
                )


__all__ = ["TreasuryLedger", "TreasuryError", "JournalEntry"]
