from .ledger import VoteLedger

__all__ = ["VoteLedger"]
