from .store import ProposalStore

__all__ = ["ProposalStore"]
