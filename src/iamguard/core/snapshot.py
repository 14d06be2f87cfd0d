"""Point-in-time snapshot models of the audited identity resources.

Every model is frozen: evaluators read snapshots and never write to them.
Per-item sub-lookups (login profile, MFA devices, group members, the
access keys of a user, key last use, policy document) are carried as
:class:`Lookup` values so that a failed call for one item is reported on
that item instead of aborting the whole stage.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Result of a per-item lookup: either a value or the error text."""

    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "Lookup[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, error: str) -> "Lookup[T]":
        return cls(error=error)

    @property
    def is_failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class MfaDevice:
    """MFA device attached to a user."""

    serial_number: str
    enable_date: Optional[datetime] = None
    """Absent when the device is provisioned but not activated."""

    @property
    def is_enabled(self) -> bool:
        return self.enable_date is not None


@dataclass(frozen=True)
class IdentityUser:
    """IAM user with its login profile and MFA devices."""

    name: str
    create_date: datetime
    password_last_used: Optional[datetime] = None
    """Absent when the user has never signed in with a password."""

    login_profile: Lookup[Optional[datetime]] = field(default_factory=lambda: Lookup.ok(None))
    """Creation time of the console login profile, ``None`` without console access."""

    mfa_devices: Lookup[Tuple[MfaDevice, ...]] = field(default_factory=lambda: Lookup.ok(()))

    @property
    def console_enabled(self) -> bool:
        return not self.login_profile.is_failed and self.login_profile.value is not None

    def enabled_mfa_serials(self) -> List[str]:
        """Serial numbers of the activated MFA devices."""
        if self.mfa_devices.is_failed or not self.mfa_devices.value:
            return []
        return [device.serial_number for device in self.mfa_devices.value if device.is_enabled]


@dataclass(frozen=True)
class IdentityGroup:
    """IAM group with its resolved member count."""

    id: str
    name: str
    create_date: Optional[datetime] = None
    members: Lookup[int] = field(default_factory=lambda: Lookup.ok(0))

    @property
    def member_count(self) -> int:
        return self.members.value or 0


@dataclass(frozen=True)
class AccessKey:
    """Access key of an IAM user."""

    user_name: str
    access_key_id: str
    status: str
    create_date: datetime
    last_used: Lookup[Optional[datetime]] = field(default_factory=lambda: Lookup.ok(None))
    """Last use time, ``None`` when the key was never used."""


@dataclass(frozen=True)
class UserAccessKeys:
    """Access keys of one IAM user, or the error that prevented listing them."""

    user_name: str
    keys: Lookup[Tuple[AccessKey, ...]] = field(default_factory=lambda: Lookup.ok(()))


@dataclass(frozen=True)
class ManagedPolicy:
    """Customer-managed policy attached to at least one identity."""

    name: str
    arn: str
    default_version_id: str
    document: Lookup[str]
    """Raw text of the default policy version."""


@dataclass(frozen=True)
class PasswordPolicy:
    """Account password policy."""

    minimum_password_length: int = 0
    require_symbols: bool = False
    require_numbers: bool = False
    require_lowercase_characters: bool = False
    require_uppercase_characters: bool = False
    allow_users_to_change_password: bool = False
    max_password_age: Optional[int] = None
    password_reuse_prevention: Optional[int] = None
    hard_expiry: Optional[bool] = None
