"""
Unit tests for the logging utility.
"""

import logging
import sys

from iamguard.utils.logger import DEFAULT_LOG_FORMAT, IAMGuardLogger, LoggingConfig, get_logger


def test_level_parsing():
    assert LoggingConfig(level="debug").level == logging.DEBUG
    assert LoggingConfig(level="WARNING").level == logging.WARNING
    assert LoggingConfig(level="verbose").level == logging.INFO


def test_format_string():
    assert LoggingConfig().log_format == DEFAULT_LOG_FORMAT
    assert LoggingConfig(log_format="%(message)s").log_format == "%(message)s"


def test_console_handler_writes_to_stderr():
    IAMGuardLogger.setup(LoggingConfig(level="WARNING", log_format="%(message)s"))

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].stream is sys.stderr
    assert handlers[0].level == logging.WARNING
    assert handlers[0].formatter._fmt == "%(message)s"


def test_setup_writes_log_file(tmp_path):
    log_file = tmp_path / "logs" / "iamguard.log"

    IAMGuardLogger.setup({"level": "DEBUG", "log_file": str(log_file)})
    get_logger("iamguard.test").debug("hello from the audit")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello from the audit" in log_file.read_text()
    assert logging.getLogger("botocore").level == logging.WARNING

    IAMGuardLogger.setup(LoggingConfig())
