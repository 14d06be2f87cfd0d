"""
Unit tests for report rendering.
"""

import json

import pytest

from iamguard.core.auditor import Auditor
from iamguard.core.report import AuditReport, ReportSection, Stage
from iamguard.core.reporting import (
    ConsoleReportGenerator,
    HtmlReportGenerator,
    JsonReportGenerator,
    create_report_generator,
    format_cell,
    generate_reports,
)
from iamguard.providers.base import ProviderError
from iamguard.utils.config import ReportConfig

from conftest import NOW


@pytest.fixture
def report(sample_provider):
    sample_provider.groups = ProviderError("list_groups failed: AccessDenied")
    sample_provider.password_policy = None
    return Auditor(sample_provider, clock=lambda: NOW).run()


@pytest.fixture
def report_config(tmp_path):
    return ReportConfig(formats=["console", "json", "html"], output_dir=str(tmp_path / "out"))


def test_format_cell():
    assert format_cell(True) == "true"
    assert format_cell(False) == "false"
    assert format_cell(None) == "-"
    assert format_cell(NOW) == "2024-06-01T12:00:00+00:00"
    assert format_cell(3) == "3"


def test_console_report(report, report_config):
    output = ConsoleReportGenerator(report, report_config).generate()

    assert "-----Start Checking Users-----" in output
    assert "-----End Checking Password Policy-----" in output
    assert "UserName" in output
    assert "alice" in output
    assert "Stage aborted: list_groups failed: AccessDenied" in output
    assert "- no password policy configured" in output
    assert "IAMGuard Audit Summary" in output


def test_console_report_escapes_markup(report_config):
    report = AuditReport(evaluated_at=NOW, sections=[ReportSection(stage=Stage.USERS, error="[bold]denied[/bold]")])

    output = ConsoleReportGenerator(report, report_config).generate()

    assert "[bold]denied[/bold]" in output


def test_json_report(report, report_config):
    path = JsonReportGenerator(report, report_config).generate()

    with open(path) as f:
        data = json.load(f)

    assert path.endswith("iamguard-report-20240601-120000.json")
    assert [section["stage"] for section in data["sections"]] == [
        "users", "groups", "access_keys", "source_ip", "password_policy",
    ]
    users = data["sections"][0]["rows"]
    assert users[0]["UserName"] == "alice"
    assert users[0]["ConsoleActive"] is True
    assert users[0]["Message"] == "account older than 1 year with console access, review required"
    assert data["sections"][1]["error"] == "list_groups failed: AccessDenied"
    assert data["sections"][4]["messages"] == ["no password policy configured"]
    assert data["summary"]["failed_stages"] == ["groups"]
    assert {"resource_kind": "password_policy", "resource_id": "account-password-policy",
            "rule": "password_policy.missing", "severity": "INFO",
            "message": "no password policy configured"} in data["findings"]


def test_html_report(report, report_config):
    path = HtmlReportGenerator(report, report_config).generate()

    with open(path) as f:
        html = f.read()

    assert "<h2>Source IP for Console</h2>" in html
    assert "deny-outside-office" in html
    assert "Stage aborted: list_groups failed: AccessDenied" in html


def test_generate_reports_uses_every_format(report, report_config):
    outputs = generate_reports(report, report_config)

    assert [format for format, _ in outputs] == ["console", "json", "html"]
    assert "-----Start Checking Users-----" in outputs[0][1]
    assert outputs[1][1].endswith(".json")
    assert outputs[2][1].endswith(".html")


def test_unsupported_format(report, report_config):
    with pytest.raises(ValueError):
        create_report_generator(report, report_config, "pdf")
