"""
Unit tests for configuration loading.
"""

import pydantic
import pytest
import yaml

from iamguard.utils.config import DEFAULT_PROFILE, DEFAULT_REGION, RuleThresholds, load_config, merge_configs


def test_defaults():
    config = load_config()

    assert config.aws.profile == DEFAULT_PROFILE
    assert config.aws.region == DEFAULT_REGION
    assert config.report.formats == ["console"]
    assert config.thresholds == RuleThresholds()
    assert config.thresholds.access_key_max_age_days == 60
    assert config.log_level == "INFO"


def test_file_and_cli_merge(tmp_path):
    path = tmp_path / "iamguard.yaml"
    path.write_text(yaml.safe_dump({
        "aws": {"profile": "prod", "region": "eu-west-1"},
        "report": {"formats": ["json"], "output_dir": "out"},
        "thresholds": {"access_key_unused_days": 45},
        "log_level": "DEBUG",
    }))

    config = load_config(str(path), {
        "aws": {"profile": None, "region": "us-east-1"},
        "report": {"formats": None, "output_dir": None},
        "log_level": None,
    })

    assert config.aws.profile == "prod"
    assert config.aws.region == "us-east-1"
    assert config.report.formats == ["json"]
    assert config.report.output_dir == "out"
    assert config.thresholds.access_key_unused_days == 45
    assert config.thresholds.access_key_max_age_days == 60
    assert config.log_level == "DEBUG"


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(str(path)).aws.region == DEFAULT_REGION


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/iamguard.yaml")


@pytest.mark.parametrize("thresholds", [{"access_key_max_age_days": 0}, {"unknown_threshold": 3}])
def test_invalid_thresholds(thresholds):
    with pytest.raises(pydantic.ValidationError):
        RuleThresholds(**thresholds)


def test_merge_configs_is_recursive():
    merged = merge_configs({"aws": {"profile": "a", "region": "r"}}, {"aws": {"region": "s"}})

    assert merged == {"aws": {"profile": "a", "region": "s"}}


def test_single_report_format_as_scalar(tmp_path):
    path = tmp_path / "iamguard.yaml"
    path.write_text("report:\n  formats: JSON\nlog_format: '%(levelname)s %(message)s'\n")

    config = load_config(str(path))

    assert config.report.formats == ["json"]
    assert config.log_format == "%(levelname)s %(message)s"


def test_unsupported_report_format(tmp_path):
    path = tmp_path / "iamguard.yaml"
    path.write_text("report:\n  formats: [console, pdf]\n")

    with pytest.raises(ValueError, match="pdf"):
        load_config(str(path))
