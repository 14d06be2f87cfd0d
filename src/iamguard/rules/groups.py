"""Group rules: membership hygiene."""

from typing import List

from iamguard.core.findings import Finding, ResourceKind, Rule, Severity
from iamguard.core.snapshot import IdentityGroup


def evaluate_group(group: IdentityGroup) -> List[Finding]:
    """Report groups whose members cannot be resolved or that have none."""
    if group.members.is_failed:
        return [Finding(
            resource_kind=ResourceKind.GROUP,
            resource_id=group.id,
            rule=Rule.GROUP_MEMBERSHIP_LOOKUP,
            severity=Severity.INFO,
            message=f"unable to resolve membership: {group.members.error}",
        )]

    if group.member_count == 0:
        return [Finding(
            resource_kind=ResourceKind.GROUP,
            resource_id=group.id,
            rule=Rule.GROUP_EMPTY,
            severity=Severity.INFO,
            message="group has no members",
        )]

    return []
