"""Managed policy rules: source-IP restriction.

The check is a literal substring test over the raw policy document, not a
parse of ``Statement[].Condition``. A document that mentions the key outside
a condition block is reported as restricted.
"""

from typing import List

from iamguard.core.findings import Finding, ResourceKind, Rule, Severity
from iamguard.core.snapshot import ManagedPolicy

SOURCE_IP_CONDITION_KEY = "aws:SourceIp"


def has_source_ip_restriction(document: str) -> bool:
    """Return True if the document text mentions the source-IP condition key."""
    return SOURCE_IP_CONDITION_KEY in document


def evaluate_policy(policy: ManagedPolicy) -> List[Finding]:
    """Report whether an attached policy restricts the caller's source IP."""
    if policy.document.is_failed:
        severity = Severity.INFO
        rule = Rule.POLICY_DOCUMENT_LOOKUP
        message = f"could not resolve policy document: {policy.document.error}"
    elif has_source_ip_restriction(policy.document.value or ""):
        severity = Severity.INFO
        rule = Rule.POLICY_SOURCE_IP
        message = "source-IP restriction present"
    else:
        severity = Severity.WARNING
        rule = Rule.POLICY_SOURCE_IP
        message = "no source-IP restriction"

    return [Finding(
        resource_kind=ResourceKind.MANAGED_POLICY,
        resource_id=policy.arn,
        rule=rule,
        severity=severity,
        message=message,
    )]
