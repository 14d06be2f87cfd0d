"""
Configuration and fixtures for pytest.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from iamguard.core.snapshot import (
    AccessKey,
    IdentityGroup,
    IdentityUser,
    Lookup,
    ManagedPolicy,
    MfaDevice,
    PasswordPolicy,
    UserAccessKeys,
)
from iamguard.providers.base import SnapshotProvider

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by IAMGuardLogger.setup during a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def console_user():
    """Return a two year old console user with an active MFA device."""
    return IdentityUser(
        name="alice",
        create_date=days_ago(730),
        password_last_used=days_ago(1),
        login_profile=Lookup.ok(days_ago(700)),
        mfa_devices=Lookup.ok((MfaDevice("arn:aws:iam::123456789012:mfa/alice", days_ago(600)),)),
    )


@pytest.fixture
def strong_password_policy():
    """Return a password policy that passes every check."""
    return PasswordPolicy(
        minimum_password_length=14,
        require_symbols=True,
        require_numbers=True,
        require_lowercase_characters=True,
        require_uppercase_characters=True,
        allow_users_to_change_password=True,
        max_password_age=90,
        password_reuse_prevention=24,
        hard_expiry=True,
    )


class FakeProvider(SnapshotProvider):
    """In-memory snapshot provider.

    A stage's collection may be replaced by an exception instance, which is
    raised when the collection is requested.
    """

    name = "fake"

    def __init__(self, users=(), groups=(), access_keys=(), policies=(), password_policy=None):
        self.users = users
        self.groups = groups
        self.access_keys = access_keys
        self.policies = policies
        self.password_policy = password_policy
        self.calls = []

    def _get(self, name, value):
        self.calls.append(name)
        if isinstance(value, Exception):
            raise value
        return list(value) if isinstance(value, (list, tuple)) else value

    def list_users(self):
        return self._get("list_users", self.users)

    def list_groups(self):
        return self._get("list_groups", self.groups)

    def list_access_keys(self):
        return self._get("list_access_keys", self.access_keys)

    def list_attached_policies(self):
        return self._get("list_attached_policies", self.policies)

    def get_password_policy(self):
        return self._get("get_password_policy", self.password_policy)


@pytest.fixture
def sample_provider(console_user, strong_password_policy):
    """Return a provider with one resource of each kind."""
    return FakeProvider(
        users=[console_user],
        groups=[IdentityGroup("AGPA1", "admins", days_ago(100), Lookup.ok(0))],
        access_keys=[
            UserAccessKeys("alice", Lookup.ok((
                AccessKey("alice", "AKIA1", "Active", days_ago(90), Lookup.ok(days_ago(45))),
            ))),
        ],
        policies=[
            ManagedPolicy(
                "deny-outside-office",
                "arn:aws:iam::123456789012:policy/deny-outside-office",
                "v1",
                Lookup.ok('{"Condition": {"IpAddress": {"aws:SourceIp": "10.0.0.0/8"}}}'),
            ),
        ],
        password_policy=strong_password_policy,
    )
