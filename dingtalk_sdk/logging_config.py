r"""
Logging configuration for applications using the DingTalk SDK.

Provides a clean, configurable logging setup using the colorlog library and a
structured error logging helper used by the SDK's error pipeline.
"""

import logging
import os
import re
import sys
from typing import Any

import colorlog

SDK_LOGGER_NAME = "dingtalk_sdk"


class SecretQueryFilter(logging.Filter):
    """Filter that masks credential query parameters in log records.

    Records are always emitted; only the parameter values are replaced.
    Values the SDK already redacted are left alone.
    """

    _PATTERN = re.compile(
        r"\b(appsecret|access_token|sign)=(?!<redacted>)[^&\s]*", re.IGNORECASE
    )

    def filter(self, record):
        """Rewrite the record message with credential values masked."""
        message = record.getMessage()
        scrubbed = self._PATTERN.sub(r"\1=<redacted>", message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = ()
        return True


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception = None,
    context: dict[str, Any] = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context.

    Args:
        error_type: Category of the error (e.g., 'transport', 'auth', 'api')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.getLogger(SDK_LOGGER_NAME).log(level, structured_message)


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; ``level`` overrides the environment and
                ``stream`` replaces stderr.
        """
        self.config = config or {}

    def configure(self):
        """Configure the SDK logger with colored output using colorlog.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        """
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = self.config.get(
            "level", logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO
        )

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(formatter)
        handler.addFilter(SecretQueryFilter())

        sdk_logger = logging.getLogger(SDK_LOGGER_NAME)
        sdk_logger.setLevel(log_level)
        # Replace handlers installed by a previous configure() call.
        for existing in list(sdk_logger.handlers):
            if isinstance(existing, logging.StreamHandler):
                sdk_logger.removeHandler(existing)
        sdk_logger.addHandler(handler)

        # aiohttp / httpx chatter is only useful when debugging the SDK itself.
        for noisy in ("aiohttp", "httpx", "httpcore"):
            logging.getLogger(noisy).setLevel(max(log_level, logging.INFO))
        return sdk_logger
