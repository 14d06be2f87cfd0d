"""Logging setup for IAMGuard.

Log records go to stderr, so they never mix with a console report written
to stdout, and optionally to a log file.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional, Union

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# Chatty at INFO; kept at WARNING whatever the configured level
NOISY_LOGGERS = ("boto3", "botocore", "urllib3")


def parse_level(level: str) -> int:
    """Map a level name to its logging constant; unknown names mean INFO."""
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


class LoggingConfig:
    """Level, destination and format of the log output."""

    def __init__(self, level: str = "INFO", log_file: Optional[str] = None, log_format: Optional[str] = None):
        """Initialize logging configuration.

        Args:
            level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Also write records to this file when set
            log_format: logging format string, DEFAULT_LOG_FORMAT when omitted
        """
        self.level = parse_level(level)
        self.log_file = log_file
        self.log_format = log_format or DEFAULT_LOG_FORMAT


class IAMGuardLogger:
    """Installs the IAMGuard handlers on the root logger."""

    config = LoggingConfig()

    @classmethod
    def setup(cls, config: Union[LoggingConfig, Dict[str, Any]]) -> None:
        """Replace the root handlers with a stderr handler and an optional file handler.

        Args:
            config: Logger configuration, or keyword arguments for one
        """
        if isinstance(config, dict):
            config = LoggingConfig(**config)
        cls.config = config

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if config.log_file:
            log_dir = os.path.dirname(config.log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(config.log_file))

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        formatter = logging.Formatter(config.log_format)
        for handler in handlers:
            handler.setLevel(config.level)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)
        root_logger.setLevel(config.level)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the named logger; its level follows the root logger."""
    return logging.getLogger(name)
