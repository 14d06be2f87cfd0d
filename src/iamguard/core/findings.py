"""Models for audit findings and related data structures."""

import enum
from dataclasses import dataclass

from dataclasses_json import dataclass_json


class Severity(enum.Enum):
    """Enumeration of finding severity levels."""

    WARNING = "WARNING"
    INFO = "INFO"


class ResourceKind(enum.Enum):
    """Kind of identity resource a finding is about."""

    USER = "user"
    GROUP = "group"
    ACCESS_KEY = "access_key"
    MANAGED_POLICY = "managed_policy"
    PASSWORD_POLICY = "password_policy"


class Rule:
    """Identifiers of the rules that can produce a finding."""

    USER_LOGIN_PROFILE_LOOKUP = "user.login_profile_lookup"
    USER_MFA_LOOKUP = "user.mfa_lookup"
    USER_CONSOLE_AGE = "user.console_age"
    USER_MFA = "user.mfa"

    GROUP_MEMBERSHIP_LOOKUP = "group.membership_lookup"
    GROUP_EMPTY = "group.empty"

    ACCESS_KEY_AGE = "access_key.age"
    ACCESS_KEY_UNUSED = "access_key.unused"
    ACCESS_KEY_LAST_USED_LOOKUP = "access_key.last_used_lookup"
    ACCESS_KEY_LISTING_LOOKUP = "access_key.listing_lookup"

    POLICY_DOCUMENT_LOOKUP = "policy.document_lookup"
    POLICY_SOURCE_IP = "policy.source_ip"

    PASSWORD_POLICY_MISSING = "password_policy.missing"
    PASSWORD_MIN_LENGTH = "password_policy.min_length"
    PASSWORD_REQUIRE_SYMBOLS = "password_policy.require_symbols"
    PASSWORD_REQUIRE_NUMBERS = "password_policy.require_numbers"
    PASSWORD_REQUIRE_LOWERCASE = "password_policy.require_lowercase"
    PASSWORD_REQUIRE_UPPERCASE = "password_policy.require_uppercase"
    PASSWORD_MAX_AGE = "password_policy.max_age"
    PASSWORD_REUSE_PREVENTION = "password_policy.reuse_prevention"
    PASSWORD_HARD_EXPIRY = "password_policy.hard_expiry"
    PASSWORD_ALLOW_CHANGE = "password_policy.allow_change"


@dataclass_json
@dataclass(frozen=True)
class Finding:
    """A single audit observation about one identity resource."""

    resource_kind: ResourceKind
    """Kind of the audited resource."""

    resource_id: str
    """Identifier of the resource (user name, group id, key id, policy ARN)."""

    rule: str
    """Identifier of the rule that produced the finding."""

    severity: Severity
    """Severity level of the finding."""

    message: str
    """Human-readable explanation."""

    def key(self) -> str:
        """Stable identifier used to de-duplicate findings."""
        return f"{self.resource_kind.value}:{self.resource_id}:{self.rule}:{self.message}"
