from .contributions import ContributionRegistry

__all__ = ["ContributionRegistry"]
