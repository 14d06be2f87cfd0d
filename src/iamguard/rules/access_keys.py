"""Access key rules: rotation age and staleness."""

from datetime import datetime, timedelta
from typing import List, Optional

from iamguard.core.findings import Finding, ResourceKind, Rule, Severity
from iamguard.core.snapshot import AccessKey, UserAccessKeys
from iamguard.utils.config import RuleThresholds


def evaluate_access_key(
    key: AccessKey,
    now: datetime,
    thresholds: Optional[RuleThresholds] = None,
) -> List[Finding]:
    """Evaluate the age and staleness rules for one access key.

    The staleness rule needs a reference point: it is skipped when the key
    was never used or its last use could not be looked up. The age rule
    always runs.

    Args:
        key: Access key snapshot
        now: Evaluation time
        thresholds: Rule thresholds, defaults when omitted

    Returns:
        Findings ordered age, then staleness
    """
    thresholds = thresholds or RuleThresholds()
    findings: List[Finding] = []

    max_age = thresholds.access_key_max_age_days
    if now - key.create_date > timedelta(days=max_age):
        findings.append(_finding(
            key, Rule.ACCESS_KEY_AGE, Severity.WARNING,
            f"key exceeds {max_age}-day age threshold",
        ))

    unused_days = thresholds.access_key_unused_days
    if key.last_used.is_failed:
        findings.append(_finding(
            key, Rule.ACCESS_KEY_LAST_USED_LOOKUP, Severity.INFO,
            f"lookup failed: {key.last_used.error}",
        ))
    elif key.last_used.value is not None and now - key.last_used.value > timedelta(days=unused_days):
        findings.append(_finding(
            key, Rule.ACCESS_KEY_UNUSED, Severity.WARNING,
            f"key unused for {unused_days}+ days",
        ))

    return findings


def evaluate_key_listing(user_keys: UserAccessKeys) -> List[Finding]:
    """Report a user whose access keys could not be listed."""
    if not user_keys.keys.is_failed:
        return []
    return [Finding(
        resource_kind=ResourceKind.USER,
        resource_id=user_keys.user_name,
        rule=Rule.ACCESS_KEY_LISTING_LOOKUP,
        severity=Severity.INFO,
        message=f"unable to list access keys: {user_keys.keys.error}",
    )]

def _finding(key: AccessKey, rule: str, severity: Severity, message: str) -> Finding:
    return Finding(
        resource_kind=ResourceKind.ACCESS_KEY,
        resource_id=key.access_key_id,
        rule=rule,
        severity=severity,
        message=message,
    )
