"""Resource snapshot providers."""

from iamguard.providers.base import AuthenticationError, ProviderError, SnapshotProvider

__all__ = ["AuthenticationError", "ProviderError", "SnapshotProvider"]
