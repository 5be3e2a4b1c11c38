from __future__ import annotations

from dataclasses import replace
from threading import RLock
from typing import Dict, List, Optional

from dac.govtypes import Contributor, Principal, ensure_amount, ensure_principal
from dac.treasury.state import TreasuryLedger


class ContributionRegistry:
    """
    Contributor -> cumulative contribution and derived voting power.

    Every recorded contribution is credited to the treasury in the same
    critical section. Records are created on first contribution and only ever
    accumulate.
    """

    def __init__(self, treasury: TreasuryLedger) -> None:
        self._treasury = treasury
        self._contributors: Dict[str, Contributor] = {}
        self._lock = RLock()

    # --- basics ---
    def record_contribution(
        self, contributor: Principal, amount: int, *, height: Optional[int] = None
    ) -> Contributor:
        who = ensure_principal(contributor, "contributor")
        amount = ensure_amount(amount)
        with self._lock:
            self._treasury.credit(amount, height=height, reason=f"donation:{who}")
            rec = self._contributors.get(who)
            if rec is None:
                rec = Contributor(principal=who)
                self._contributors[who] = rec
            rec.add(amount, height=height)
            return replace(rec)

    def voting_power_of(self, contributor: Principal) -> int:
        rec = self._contributors.get(contributor)
        return rec.voting_power if rec is not None else 0

    def get(self, contributor: Principal) -> Optional[Contributor]:
        rec = self._contributors.get(contributor)
        return replace(rec) if rec is not None else None

    def contributors(self) -> List[Contributor]:
        with self._lock:
            return [replace(c) for _, c in sorted(self._contributors.items())]

    def total_contributed(self) -> int:
        with self._lock:
            return sum(c.total_contributed for c in self._contributors.values())

    def __len__(self) -> int:
        return len(self._contributors)

    def __contains__(self, contributor: object) -> bool:
        return contributor in self._contributors

    # --- load/save ---
    def dump(self) -> Dict:
        with self._lock:
            return {k: v.to_dict() for k, v in sorted(self._contributors.items())}

    @classmethod
    def load(cls, data: Dict, treasury: TreasuryLedger) -> "ContributionRegistry":
        reg = cls(treasury)
        for k, v in data.items():
            reg._contributors[k] = Contributor.from_dict(v)
        return reg


__all__ = ["ContributionRegistry"]
