"""Account password policy rules."""

from typing import Callable, List, Optional, Tuple

from iamguard.core.findings import Finding, ResourceKind, Rule, Severity
from iamguard.core.snapshot import PasswordPolicy
from iamguard.utils.config import RuleThresholds

PASSWORD_POLICY_ID = "account-password-policy"

Check = Tuple[str, Callable[[PasswordPolicy, RuleThresholds], bool], Callable[[RuleThresholds], str]]

# (rule, violated?, message); all checks run, in this order
CHECKS: List[Check] = [
    (
        Rule.PASSWORD_MIN_LENGTH,
        lambda p, t: p.minimum_password_length < t.min_password_length,
        lambda t: f"minimum password length < {t.min_password_length}",
    ),
    (
        Rule.PASSWORD_REQUIRE_SYMBOLS,
        lambda p, t: not p.require_symbols,
        lambda t: "require symbols",
    ),
    (
        Rule.PASSWORD_REQUIRE_NUMBERS,
        lambda p, t: not p.require_numbers,
        lambda t: "require numbers",
    ),
    (
        Rule.PASSWORD_REQUIRE_LOWERCASE,
        lambda p, t: not p.require_lowercase_characters,
        lambda t: "require lowercase characters",
    ),
    (
        Rule.PASSWORD_REQUIRE_UPPERCASE,
        lambda p, t: not p.require_uppercase_characters,
        lambda t: "require uppercase characters",
    ),
    (
        Rule.PASSWORD_MAX_AGE,
        lambda p, t: (p.max_password_age or 0) < t.max_password_age_days,
        lambda t: f"max password age < {t.max_password_age_days} days",
    ),
    (
        Rule.PASSWORD_REUSE_PREVENTION,
        lambda p, t: (p.password_reuse_prevention or 0) < t.min_password_reuse_prevention,
        lambda t: f"password reuse prevention < {t.min_password_reuse_prevention}",
    ),
    (
        Rule.PASSWORD_HARD_EXPIRY,
        lambda p, t: not p.hard_expiry,
        lambda t: "password hard expiry is disabled, please change to true",
    ),
    (
        Rule.PASSWORD_ALLOW_CHANGE,
        lambda p, t: not p.allow_users_to_change_password,
        lambda t: "allow users to change password is disabled, please change to true",
    ),
]


def evaluate_password_policy(
    policy: Optional[PasswordPolicy],
    thresholds: Optional[RuleThresholds] = None,
) -> List[Finding]:
    """Evaluate the account password policy.

    Args:
        policy: Password policy, ``None`` when the account has none
        thresholds: Rule thresholds, defaults when omitted

    Returns:
        A single finding for a missing policy, otherwise one finding per
        violated check
    """
    if policy is None:
        return [_finding(Rule.PASSWORD_POLICY_MISSING, Severity.INFO, "no password policy configured")]

    thresholds = thresholds or RuleThresholds()
    return [
        _finding(rule, Severity.WARNING, message(thresholds))
        for rule, violated, message in CHECKS
        if violated(policy, thresholds)
    ]


def _finding(rule: str, severity: Severity, message: str) -> Finding:
    return Finding(
        resource_kind=ResourceKind.PASSWORD_POLICY,
        resource_id=PASSWORD_POLICY_ID,
        rule=rule,
        severity=severity,
        message=message,
    )
