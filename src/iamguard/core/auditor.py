"""Audit orchestration: runs every stage against one snapshot provider."""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..providers.base import ProviderError, SnapshotProvider
from ..rules import (
    evaluate_access_key,
    evaluate_group,
    evaluate_key_listing,
    evaluate_password_policy,
    evaluate_policy,
    evaluate_user,
    has_source_ip_restriction,
)
from ..utils.config import RuleThresholds
from ..utils.logger import get_logger
from .report import (
    AuditReport,
    ReportRow,
    ReportSection,
    Stage,
    access_key_row,
    group_row,
    key_listing_row,
    policy_row,
    user_row,
)

logger = get_logger(__name__)

STAGE_ORDER: List[Stage] = [
    Stage.USERS,
    Stage.GROUPS,
    Stage.ACCESS_KEYS,
    Stage.SOURCE_IP,
    Stage.PASSWORD_POLICY,
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Auditor:
    """Runs the five evaluation stages in a fixed order.

    Stages share nothing but the evaluation time. A stage whose resources
    cannot be listed is recorded as aborted and the next stage still runs.
    """

    def __init__(
        self,
        provider: SnapshotProvider,
        thresholds: Optional[RuleThresholds] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the auditor.

        Args:
            provider: Source of the identity snapshot
            thresholds: Rule thresholds, defaults when omitted
            clock: Returns the evaluation time, called once per run
        """
        self.provider = provider
        self.thresholds = thresholds or RuleThresholds()
        self.clock = clock
        self._stages: Dict[Stage, Callable[[datetime], ReportSection]] = {
            Stage.USERS: self._audit_users,
            Stage.GROUPS: self._audit_groups,
            Stage.ACCESS_KEYS: self._audit_access_keys,
            Stage.SOURCE_IP: self._audit_source_ip,
            Stage.PASSWORD_POLICY: self._audit_password_policy,
        }

    def run(self) -> AuditReport:
        """Run every stage and return the report.

        Returns:
            Report with one section per stage, in stage order
        """
        now = self.clock()
        logger.info(f"Starting IAM audit at {now.isoformat()} using provider {self.provider.name}")

        report = AuditReport(evaluated_at=now)
        for stage in STAGE_ORDER:
            report.sections.append(self._run_stage(stage, now))

        summary = report.summary()
        logger.info(f"Audit completed, found {summary['total_findings']} findings")
        for severity, count in summary["by_severity"].items():
            logger.info(f"{severity}: {count}")
        if report.failed_stages:
            logger.warning(
                "Aborted stages: " + ", ".join(stage.value for stage in report.failed_stages)
            )
        return report

    def _run_stage(self, stage: Stage, now: datetime) -> ReportSection:
        logger.info(f"Start checking {stage.title}")
        try:
            section = self._stages[stage](now)
        except ProviderError as e:
            logger.error(f"Error checking {stage.title}: {e}")
            return ReportSection(stage=stage, error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error checking {stage.title}: {e}", exc_info=True)
            return ReportSection(stage=stage, error=f"unexpected error: {e}")

        logger.info(f"End checking {stage.title}, found {len(section.findings)} findings")
        return section

    def _audit_users(self, now: datetime) -> ReportSection:
        rows = [
            user_row(user, evaluate_user(user, now, self.thresholds))
            for user in self.provider.list_users()
        ]
        return ReportSection(stage=Stage.USERS, rows=rows)

    def _audit_groups(self, now: datetime) -> ReportSection:
        rows = [group_row(group, evaluate_group(group)) for group in self.provider.list_groups()]
        return ReportSection(stage=Stage.GROUPS, rows=rows)

    def _audit_access_keys(self, now: datetime) -> ReportSection:
        rows: List[ReportRow] = []
        for user_keys in self.provider.list_access_keys():
            if user_keys.keys.is_failed:
                rows.append(key_listing_row(user_keys, evaluate_key_listing(user_keys)))
                continue
            for key in user_keys.keys.value or ():
                rows.append(access_key_row(key, evaluate_access_key(key, now, self.thresholds)))
        return ReportSection(stage=Stage.ACCESS_KEYS, rows=rows)

    def _audit_source_ip(self, now: datetime) -> ReportSection:
        rows: List[ReportRow] = []
        for policy in self.provider.list_attached_policies():
            enabled = not policy.document.is_failed and has_source_ip_restriction(policy.document.value or "")
            rows.append(policy_row(policy, evaluate_policy(policy), enabled))
        return ReportSection(stage=Stage.SOURCE_IP, rows=rows)

    def _audit_password_policy(self, now: datetime) -> ReportSection:
        policy = self.provider.get_password_policy()
        return ReportSection(
            stage=Stage.PASSWORD_POLICY,
            extra_findings=evaluate_password_policy(policy, self.thresholds),
        )
