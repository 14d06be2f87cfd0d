"""Aggregation of findings into ordered report sections.

Each stage produces one :class:`ReportSection`. Rows keep the snapshot order
and the findings of a row keep rule order. When several rules fire on the
same resource, identical findings are collapsed, the row message joins the
rest with ``"; "`` and the row severity is the highest among them.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .findings import Finding, Severity
from .snapshot import AccessKey, IdentityGroup, IdentityUser, ManagedPolicy, UserAccessKeys

MESSAGE_SEPARATOR = "; "
NEVER_USED_PASSWORD = "this user has never used password"

SEVERITY_ORDER = {
    Severity.WARNING: 0,
    Severity.INFO: 1,
}


class Stage(enum.Enum):
    """Evaluation stages, in execution order."""

    USERS = "users"
    GROUPS = "groups"
    ACCESS_KEYS = "access_keys"
    SOURCE_IP = "source_ip"
    PASSWORD_POLICY = "password_policy"

    @property
    def title(self) -> str:
        return STAGE_TITLES[self]


STAGE_TITLES = {
    Stage.USERS: "Users",
    Stage.GROUPS: "Groups",
    Stage.ACCESS_KEYS: "Access Key",
    Stage.SOURCE_IP: "Source IP for Console",
    Stage.PASSWORD_POLICY: "Password Policy",
}

STAGE_HEADERS: Dict[Stage, Tuple[str, ...]] = {
    Stage.USERS: ("UserName", "CreateDate", "LastAccess", "ConsoleActive", "MFAEnabled", "Message"),
    Stage.GROUPS: ("GroupID", "GroupName", "CreateDate", "Users", "Message"),
    Stage.ACCESS_KEYS: ("UserName", "AccessKeyId", "Status", "Message"),
    Stage.SOURCE_IP: ("PolicyName", "PolicyArn", "Enabled-SourceIp", "Message"),
    Stage.PASSWORD_POLICY: ("Message",),
}


def dedupe_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Drop repeated findings, keeping the first occurrence."""
    seen: Dict[str, Finding] = {}
    for finding in findings:
        seen.setdefault(finding.key(), finding)
    return list(seen.values())


def highest_severity(findings: Sequence[Finding]) -> Optional[Severity]:
    """Return the most severe level among *findings*, or None if empty."""
    if not findings:
        return None
    return min((f.severity for f in findings), key=SEVERITY_ORDER.__getitem__)


@dataclass
class ReportRow:
    """One resource of a section: descriptive cells plus its findings."""

    cells: Tuple[Any, ...]
    findings: List[Finding] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.findings = dedupe_findings(self.findings)

    @property
    def message(self) -> str:
        return MESSAGE_SEPARATOR.join(f.message for f in self.findings)

    @property
    def severity(self) -> Optional[Severity]:
        return highest_severity(self.findings)

    def values(self) -> Tuple[Any, ...]:
        """Cells followed by the message column."""
        return self.cells + (self.message,)


@dataclass
class ReportSection:
    """Result of one stage."""

    stage: Stage
    rows: List[ReportRow] = field(default_factory=list)
    extra_findings: List[Finding] = field(default_factory=list)
    """Findings without a row (the account-scoped password policy)."""

    error: Optional[str] = None
    """Set when the stage could not list its resources."""

    @property
    def title(self) -> str:
        return self.stage.title

    @property
    def headers(self) -> Tuple[str, ...]:
        return STAGE_HEADERS[self.stage]

    @property
    def aborted(self) -> bool:
        return self.error is not None

    @property
    def findings(self) -> List[Finding]:
        result: List[Finding] = []
        for row in self.rows:
            result.extend(row.findings)
        result.extend(dedupe_findings(self.extra_findings))
        return result

    @property
    def messages(self) -> List[str]:
        """Flat list of messages, used for the password policy section."""
        return [f.message for f in self.findings]


@dataclass
class AuditReport:
    """Multi-section report of a single audit run."""

    evaluated_at: datetime
    sections: List[ReportSection] = field(default_factory=list)

    @property
    def findings(self) -> List[Finding]:
        return [f for section in self.sections for f in section.findings]

    @property
    def failed_stages(self) -> List[Stage]:
        return [section.stage for section in self.sections if section.aborted]

    @property
    def exit_code(self) -> int:
        """Non-zero when any stage aborted; findings never change it."""
        return 1 if self.failed_stages else 0

    def section(self, stage: Stage) -> ReportSection:
        for section in self.sections:
            if section.stage == stage:
                return section
        raise KeyError(stage)

    def summary(self) -> Dict[str, Any]:
        """Counts of findings per severity and per stage."""
        by_severity = {level.name: 0 for level in Severity}
        for finding in self.findings:
            by_severity[finding.severity.name] += 1
        return {
            "evaluated_at": self.evaluated_at.isoformat(),
            "total_findings": sum(by_severity.values()),
            "by_severity": by_severity,
            "by_stage": {section.stage.value: len(section.findings) for section in self.sections},
            "failed_stages": [stage.value for stage in self.failed_stages],
        }


def user_row(user: IdentityUser, findings: List[Finding]) -> ReportRow:
    """Build the Users row: name, created, last password use, console, MFA."""
    last_used: Any = user.password_last_used or NEVER_USED_PASSWORD
    # Console access is unknown when the login profile lookup failed
    console: Optional[bool] = None if user.login_profile.is_failed else user.console_enabled
    return ReportRow(
        cells=(
            user.name,
            user.create_date,
            last_used,
            console,
            ", ".join(user.enabled_mfa_serials()),
        ),
        findings=findings,
    )


def group_row(group: IdentityGroup, findings: List[Finding]) -> ReportRow:
    """Build the Groups row: id, name, created, member count."""
    return ReportRow(
        cells=(group.id, group.name, group.create_date, group.member_count),
        findings=findings,
    )


def access_key_row(key: AccessKey, findings: List[Finding]) -> ReportRow:
    """Build the Access Key row: owner, key id, status."""
    return ReportRow(
        cells=(key.user_name, key.access_key_id, key.status),
        findings=findings,
    )


def key_listing_row(user_keys: UserAccessKeys, findings: List[Finding]) -> ReportRow:
    """Build the Access Key row of a user whose keys could not be listed."""
    return ReportRow(cells=(user_keys.user_name, None, None), findings=findings)


def policy_row(policy: ManagedPolicy, findings: List[Finding], source_ip_enabled: bool) -> ReportRow:
    """Build the Source IP row: name, ARN, restriction flag."""
    return ReportRow(
        cells=(policy.name, policy.arn, source_ip_enabled),
        findings=findings,
    )
