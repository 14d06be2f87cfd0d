"""Configuration utilities for IAMGuard."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from iamguard.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REGION = "ap-northeast-2"
DEFAULT_PROFILE = "default"

REPORT_FORMATS = ("console", "json", "html")


class RuleThresholds(BaseModel):
    """Thresholds used by the rule evaluators."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    console_user_max_age_days: int = Field(default=365, gt=0)
    access_key_max_age_days: int = Field(default=60, gt=0)
    access_key_unused_days: int = Field(default=30, gt=0)
    min_password_length: int = Field(default=8, gt=0)
    max_password_age_days: int = Field(default=90, gt=0)
    min_password_reuse_prevention: int = Field(default=1, gt=0)


@dataclass
class AwsConfig:
    """AWS connection configuration."""
    profile: Optional[str] = DEFAULT_PROFILE
    region: str = DEFAULT_REGION


@dataclass
class ReportConfig:
    """Report generation configuration."""
    formats: List[str] = field(default_factory=lambda: ["console"])
    output_dir: str = "reports"
    report_name_prefix: str = "iamguard-report"

    def __post_init__(self) -> None:
        # YAML allows a single format written as a scalar
        if isinstance(self.formats, str):
            self.formats = [self.formats]
        self.formats = [format.lower() for format in self.formats]
        unsupported = [format for format in self.formats if format not in REPORT_FORMATS]
        if unsupported:
            raise ValueError(f"Unsupported report format: {', '.join(unsupported)}")


@dataclass
class ScanConfig:
    """Main configuration for IAMGuard audits."""
    aws: AwsConfig = field(default_factory=AwsConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    thresholds: RuleThresholds = field(default_factory=RuleThresholds)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: Optional[str] = None


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        raise

    if config is None:
        # Empty config file
        return {}

    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries recursively.

    Args:
        base: Base configuration dictionary
        override: Override configuration dictionary

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def _drop_unset(values: Dict[str, Any]) -> Dict[str, Any]:
    """Remove ``None`` values (unspecified CLI options) at every level."""
    cleaned: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            value = _drop_unset(value)
            if not value:
                continue
        elif value is None or value == ():
            continue
        cleaned[key] = value
    return cleaned


def load_config(config_path: Optional[str] = None, cli_args: Optional[Dict[str, Any]] = None) -> ScanConfig:
    """Load and merge configuration from file and CLI arguments.

    CLI arguments take precedence over the file.

    Args:
        config_path: Path to the configuration file
        cli_args: Dictionary of CLI arguments, nested like the file

    Returns:
        ScanConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        pydantic.ValidationError: If thresholds are invalid
        ValueError: If a report format is not supported
    """
    config_dict: Dict[str, Any] = {}

    if config_path:
        config_dict = merge_configs(config_dict, load_config_file(config_path))

    if cli_args:
        config_dict = merge_configs(config_dict, _drop_unset(cli_args))

    aws_config = config_dict.get('aws', {})
    report_config = config_dict.get('report', {})
    thresholds = config_dict.get('thresholds', {})

    return ScanConfig(
        aws=AwsConfig(**aws_config) if aws_config else AwsConfig(),
        report=ReportConfig(**report_config) if report_config else ReportConfig(),
        thresholds=RuleThresholds(**thresholds),
        log_level=config_dict.get('log_level', 'INFO'),
        log_file=config_dict.get('log_file'),
        log_format=config_dict.get('log_format'),
    )
