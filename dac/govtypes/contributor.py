from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from . import Principal


@dataclass
class Contributor:
    """
    Cumulative contribution record for one principal.

    voting_power always equals total_contributed: contributions are never
    revoked and power neither decays nor delegates.
    """

    principal: Principal
    total_contributed: int = 0
    voting_power: int = 0
    donations: int = 0
    first_height: Optional[int] = None
    last_height: Optional[int] = None

    def add(self, amount: int, *, height: Optional[int] = None) -> None:
        self.total_contributed += int(amount)
        self.voting_power = self.total_contributed
        self.donations += 1
        if height is not None:
            if self.first_height is None:
                self.first_height = int(height)
            self.last_height = int(height)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["principal"] = str(self.principal)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Contributor":
        total = int(d["total_contributed"])
        return Contributor(
            principal=Principal(d["principal"]),
            total_contributed=total,
            voting_power=total,
            donations=int(d.get("donations", 0)),
            first_height=d.get("first_height"),
            last_height=d.get("last_height"),
        )


__all__ = ["Contributor"]
