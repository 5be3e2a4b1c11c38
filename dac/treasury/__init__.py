from __future__ import annotations
"""
dac.treasury
============

Treasury-facing package: the pooled balance ledger (`state`) and the contract
for the external payout primitive (`transfer`). Both are deterministic and
side-effect free at import time.
"""

from .state import JournalEntry, TreasuryError, TreasuryLedger
from .transfer import InMemoryPayments, PaymentTransfer, TransferRecord

__all__ = [
    "TreasuryLedger",
    "TreasuryError",
    "JournalEntry",
    "PaymentTransfer",
    "InMemoryPayments",
    "TransferRecord",
]
