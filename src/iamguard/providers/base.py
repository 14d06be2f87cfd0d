"""Base class for identity snapshot providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.snapshot import IdentityGroup, IdentityUser, ManagedPolicy, PasswordPolicy, UserAccessKeys


class ProviderError(Exception):
    """A base collection could not be listed; aborts the current stage."""


class AuthenticationError(Exception):
    """Credentials or connectivity could not be established."""


class SnapshotProvider(ABC):
    """Source of the identity resources audited in one run.

    List methods raise :class:`ProviderError` when the collection itself
    cannot be produced. Failures of per-item lookups are carried inside the
    returned items as :class:`~iamguard.core.snapshot.Lookup` values.
    """

    name: str = "base"
    """Name of the provider."""

    @abstractmethod
    def list_users(self) -> List[IdentityUser]:
        """List users with their login profile and MFA devices."""

    @abstractmethod
    def list_groups(self) -> List[IdentityGroup]:
        """List groups with their member counts."""

    @abstractmethod
    def list_access_keys(self) -> List[UserAccessKeys]:
        """List the access keys of every user, with their last use."""

    @abstractmethod
    def list_attached_policies(self) -> List[ManagedPolicy]:
        """List attached customer-managed policies with their documents."""

    @abstractmethod
    def get_password_policy(self) -> Optional[PasswordPolicy]:
        """Return the account password policy, or None if none is set."""
