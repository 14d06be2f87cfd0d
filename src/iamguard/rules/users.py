"""User rules: console account age and MFA presence."""

from datetime import datetime, timedelta
from typing import List, Optional

from iamguard.core.findings import Finding, ResourceKind, Rule, Severity
from iamguard.core.snapshot import IdentityUser
from iamguard.utils.config import RuleThresholds

NO_ACTIVE_MFA = "no active MFA device"


def _finding(user: IdentityUser, rule: str, severity: Severity, message: str) -> Finding:
    return Finding(
        resource_kind=ResourceKind.USER,
        resource_id=user.name,
        rule=rule,
        severity=severity,
        message=message,
    )


def evaluate_user(
    user: IdentityUser,
    now: datetime,
    thresholds: Optional[RuleThresholds] = None,
) -> List[Finding]:
    """Evaluate the console age and MFA rules for one user.

    A failed login-profile lookup is reported and leaves console access
    treated as disabled; a failed MFA lookup is reported and skips only the
    MFA rule.

    Args:
        user: User snapshot
        now: Evaluation time
        thresholds: Rule thresholds, defaults when omitted

    Returns:
        Findings in rule order
    """
    thresholds = thresholds or RuleThresholds()
    findings: List[Finding] = []

    if user.login_profile.is_failed:
        findings.append(_finding(
            user,
            Rule.USER_LOGIN_PROFILE_LOOKUP,
            Severity.INFO,
            f"lookup failed: {user.login_profile.error}",
        ))

    max_age = thresholds.console_user_max_age_days
    if user.console_enabled and now - user.create_date > timedelta(days=max_age):
        findings.append(_finding(
            user,
            Rule.USER_CONSOLE_AGE,
            Severity.WARNING,
            f"account older than {_describe_days(max_age)} with console access, review required",
        ))

    if user.mfa_devices.is_failed:
        findings.append(_finding(
            user,
            Rule.USER_MFA_LOOKUP,
            Severity.INFO,
            f"lookup failed: {user.mfa_devices.error}",
        ))
    elif user.console_enabled and not user.enabled_mfa_serials():
        # An empty device list counts the same as only inactive devices
        findings.append(_finding(user, Rule.USER_MFA, Severity.WARNING, NO_ACTIVE_MFA))

    return findings


def _describe_days(days: int) -> str:
    if days % 365 == 0:
        years = days // 365
        return "1 year" if years == 1 else f"{years} years"
    return f"{days} days"
