"""Main command-line interface for IAMGuard."""

import sys
from typing import Any, Dict, Optional, Tuple

import click

from iamguard import __version__
from iamguard.core.auditor import Auditor
from iamguard.core.reporting import generate_reports
from iamguard.providers.aws import AwsIamProvider, create_session
from iamguard.providers.base import AuthenticationError
from iamguard.utils.config import DEFAULT_PROFILE, DEFAULT_REGION, REPORT_FORMATS, ScanConfig, load_config
from iamguard.utils.logger import IAMGuardLogger, LoggingConfig, get_logger

EXIT_FATAL = 2

logger = get_logger(__name__)


def setup_logging(config: ScanConfig) -> None:
    """Set up logging based on configuration.

    Args:
        config: Scan configuration
    """
    log_config = LoggingConfig(
        level=config.log_level,
        log_file=config.log_file,
        log_format=config.log_format,
    )
    IAMGuardLogger.setup(log_config)


def build_cli_args(
    profile: Optional[str],
    region: Optional[str],
    formats: Tuple[str, ...],
    output_dir: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
) -> Dict[str, Any]:
    """Arrange CLI options like the configuration file; unset values are dropped on merge."""
    return {
        "aws": {"profile": profile, "region": region},
        "report": {"formats": list(formats) or None, "output_dir": output_dir},
        "log_level": log_level,
        "log_file": log_file,
    }


def load_or_exit(config_path: Optional[str], cli_args: Dict[str, Any]) -> ScanConfig:
    try:
        return load_config(config_path, cli_args)
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(EXIT_FATAL)


@click.group()
@click.version_option(version=__version__)
def cli():
    """IAMGuard: point-in-time IAM security auditor for AWS accounts."""


@cli.command()
def version() -> None:
    """Print the IAMGuard version."""
    click.echo(f"iamguard {__version__}")


@cli.group()
@click.option(
    "--region", "-r",
    type=str,
    help=f"AWS region. [default: {DEFAULT_REGION}]"
)
@click.option(
    "--profile", "-p",
    type=str,
    help=f"AWS profile. [default: {DEFAULT_PROFILE}]"
)
@click.pass_context
def checker(ctx, region: Optional[str], profile: Optional[str]) -> None:
    """Check AWS security."""
    ctx.ensure_object(dict)
    ctx.obj["region"] = region
    ctx.obj["profile"] = profile


@checker.command()
@click.option("--region", "-r", type=str, help="AWS region, overrides the checker option.")
@click.option("--profile", "-p", type=str, help="AWS profile, overrides the checker option.")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file."
)
@click.option(
    "--format", "-f", "formats",
    type=click.Choice(REPORT_FORMATS, case_sensitive=False),
    multiple=True,
    help="Report format, repeatable. [default: console]"
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    help="Directory to store file reports."
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                      case_sensitive=False),
    help="Log level."
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Log file path."
)
@click.pass_context
def iam(
    ctx,
    region: Optional[str],
    profile: Optional[str],
    config: Optional[str],
    formats: Tuple[str, ...],
    output_dir: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
) -> None:
    """Check IAM users, groups, access keys, policies and password policy."""
    cli_args = build_cli_args(
        profile or ctx.obj.get("profile"),
        region or ctx.obj.get("region"),
        formats,
        output_dir,
        log_level,
        log_file,
    )
    scan_config = load_or_exit(config, cli_args)
    setup_logging(scan_config)

    try:
        session = create_session(scan_config.aws)
    except AuthenticationError as e:
        logger.error(str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FATAL)

    auditor = Auditor(AwsIamProvider(session), thresholds=scan_config.thresholds)
    report = auditor.run()

    for format, output in generate_reports(report, scan_config.report):
        if format == "console":
            click.echo(output)
        else:
            click.echo(f"Generated report: {output}")

    for stage in report.failed_stages:
        click.echo(f"Stage {stage.value} aborted: {report.section(stage).error}", err=True)

    sys.exit(report.exit_code)


@checker.command()
@click.pass_context
def verify(ctx) -> None:
    """Verify AWS credentials for the selected profile."""
    cli_args = build_cli_args(ctx.obj.get("profile"), ctx.obj.get("region"), (), None, None, None)
    scan_config = load_or_exit(None, cli_args)
    setup_logging(scan_config)

    click.echo("Verifying AWS credentials...")
    try:
        create_session(scan_config.aws)
    except AuthenticationError as e:
        click.echo(f"AWS credential verification failed: {e}", err=True)
        sys.exit(EXIT_FATAL)
    click.echo("AWS credentials verified successfully!")


def main():
    """Run the IAMGuard CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
