"""Reporting functionality for IAMGuard."""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Tuple

import jinja2
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..utils.config import ReportConfig
from ..utils.logger import get_logger
from .findings import Severity
from .report import AuditReport, ReportSection, Stage

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

SEVERITY_STYLES = {
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def format_cell(value: Any) -> str:
    """Render a row cell as text."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _json_serialize(obj: Any) -> Any:
    """Handle serialization of special types.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation
    """
    if isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, Severity):
        return obj.name
    raise TypeError(f"Type {type(obj)} not serializable")


class ReportGenerator(ABC):
    """Base class for report generators."""

    def __init__(self, report: AuditReport, config: ReportConfig):
        """Initialize the report generator.

        Args:
            report: Audit report to render
            config: Report configuration
        """
        self.report = report
        self.config = config

    @abstractmethod
    def generate(self) -> str:
        """Generate the report.

        Returns:
            Path to the generated report, or the rendered text for console output
        """

    def _output_file(self, extension: str) -> Path:
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp_str = self.report.evaluated_at.strftime("%Y%m%d-%H%M%S")
        return output_dir / f"{self.config.report_name_prefix}-{timestamp_str}.{extension}"


class JsonReportGenerator(ReportGenerator):
    """Generate reports in JSON format."""

    def generate(self) -> str:
        """Generate a JSON report with every section and finding.

        Returns:
            Path to the generated report
        """
        output_file = self._output_file("json")
        with open(output_file, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=_json_serialize)

        logger.info(f"JSON report generated: {output_file}")
        return str(output_file)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_timestamp": self.report.evaluated_at.isoformat(),
            "tool_version": __version__,
            "summary": self.report.summary(),
            "sections": [self._section_dict(section) for section in self.report.sections],
            "findings": [finding.to_dict(encode_json=True) for finding in self.report.findings],
        }

    def _section_dict(self, section: ReportSection) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "stage": section.stage.value,
            "title": section.title,
            "error": section.error,
        }
        if section.stage == Stage.PASSWORD_POLICY:
            data["messages"] = section.messages
        else:
            data["rows"] = [
                dict(zip(section.headers, row.values())) for row in section.rows
            ]
        return data


class HtmlReportGenerator(ReportGenerator):
    """Generate reports in HTML format."""

    def generate(self) -> str:
        """Generate an HTML report with one table per stage.

        Returns:
            Path to the generated report
        """
        output_file = self._output_file("html")

        env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
            autoescape=jinja2.select_autoescape(['html', 'xml'])
        )
        env.filters["cell"] = format_cell
        template = env.get_template("report.html")

        html_content = template.render(
            report=self.report,
            summary=self.report.summary(),
            password_policy=Stage.PASSWORD_POLICY,
            version=__version__,
        )

        with open(output_file, 'w') as f:
            f.write(html_content)

        logger.info(f"HTML report generated: {output_file}")
        return str(output_file)


class ConsoleReportGenerator(ReportGenerator):
    """Generate text-based reports for console output."""

    def generate(self) -> str:
        """Generate a console report.

        Returns:
            String with the report content
        """
        console = Console(width=200, highlight=False)

        with console.capture() as capture:
            for section in self.report.sections:
                console.print(f"\n-----Start Checking {section.title}-----")
                if section.aborted:
                    console.print(f"[bold red]Stage aborted:[/bold red] {escape(section.error or '')}")
                elif section.stage == Stage.PASSWORD_POLICY:
                    for message in section.messages:
                        console.print(f"- {escape(message)}")
                else:
                    console.print(self._section_table(section))
                console.print(f"-----End Checking {section.title}-----")

            console.print(self._summary_table())

        return capture.get()

    def _section_table(self, section: ReportSection) -> Table:
        table = Table(show_lines=True)
        for header in section.headers:
            table.add_column(header, overflow="fold")
        for row in section.rows:
            table.add_row(
                *(escape(format_cell(value)) for value in row.values()),
                style=SEVERITY_STYLES.get(row.severity),
            )
        return table

    def _summary_table(self) -> Table:
        summary = self.report.summary()
        table = Table(title="IAMGuard Audit Summary")
        table.add_column("Severity", style="bold")
        table.add_column("Count", justify="right")
        for severity in Severity:
            table.add_row(
                severity.name,
                str(summary["by_severity"][severity.name]),
                style=SEVERITY_STYLES[severity],
            )
        table.add_row("TOTAL", str(summary["total_findings"]), style="bold")
        return table


def create_report_generator(report: AuditReport,
                            config: ReportConfig,
                            format: str) -> ReportGenerator:
    """Factory function to create report generators.

    Args:
        report: Audit report to render
        config: Report configuration
        format: Report format (json, html, console)

    Returns:
        Appropriate report generator instance

    Raises:
        ValueError: If an unsupported format is specified
    """
    format = format.lower()
    if format == 'json':
        return JsonReportGenerator(report, config)
    elif format == 'html':
        return HtmlReportGenerator(report, config)
    elif format == 'console':
        return ConsoleReportGenerator(report, config)
    else:
        raise ValueError(f"Unsupported report format: {format}")


def generate_reports(report: AuditReport, config: ReportConfig) -> List[Tuple[str, str]]:
    """Generate every configured report format.

    Args:
        report: Audit report to render
        config: Report configuration

    Returns:
        One (format, output) pair per format; the output is a file path, or
        the rendered text for console output
    """
    formats = config.formats if config.formats else ['console']
    return [
        (format.lower(), create_report_generator(report, config, format).generate())
        for format in formats
    ]
