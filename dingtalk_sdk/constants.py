"""
Configuration constants for the DingTalk SDK

This module contains the defaults used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, logs a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    return default


SDK_NAME = "dingtalk-sdk"
SDK_VERSION = "0.1.0"
DEFAULT_CLIENT_NAME = f"{SDK_NAME}/{SDK_VERSION}"

# Base URLs (legacy oapi host serves webhook + topapi; api host serves v1.0 robot APIs)
DEFAULT_WEBHOOK_BASE_URL = _get_env_str(
    "DINGTALK_WEBHOOK_BASE_URL", "https://oapi.dingtalk.com"
)
DEFAULT_ENTERPRISE_BASE_URL = _get_env_str(
    "DINGTALK_ENTERPRISE_BASE_URL", "https://api.dingtalk.com"
)

# Access token lifetime handling
DEFAULT_ACCESS_TOKEN_TTL_SECONDS = _get_env_int(
    "DEFAULT_ACCESS_TOKEN_TTL_SECONDS", 7200
)  # Used when the server omits expires_in
MIN_ACCESS_TOKEN_TTL_SECONDS = _get_env_int(
    "MIN_ACCESS_TOKEN_TTL_SECONDS", 30
)  # Floor applied to server-reported expires_in
TOKEN_REFRESH_MARGIN_SECONDS = _get_env_float(
    "TOKEN_REFRESH_MARGIN_SECONDS", 120.0
)  # Cached tokens are treated as stale this long before expiry

# HTTP timeouts
REQUEST_TIMEOUT_SECONDS = _get_env_float("REQUEST_TIMEOUT_SECONDS", 10.0)
CONNECT_TIMEOUT_SECONDS = _get_env_float("CONNECT_TIMEOUT_SECONDS", 5.0)

# Retry defaults (RetryConfig.standard)
DEFAULT_MAX_RETRIES = _get_env_int("DEFAULT_MAX_RETRIES", 2)
DEFAULT_BASE_BACKOFF_SECONDS = _get_env_float("DEFAULT_BASE_BACKOFF_SECONDS", 0.2)
RETRY_MAX_BACKOFF_SECONDS = _get_env_float("RETRY_MAX_BACKOFF_SECONDS", 30.0)

# Error body snippets
BODY_SNIPPET_MAX_BYTES = _get_env_int("BODY_SNIPPET_MAX_BYTES", 4096)
REDACTION_WINDOW_CHARS = _get_env_int("REDACTION_WINDOW_CHARS", 32)

# Business error codes DingTalk uses for transient throttling
DEFAULT_RETRYABLE_API_CODES: frozenset[int] = frozenset({130101, 130102})

# Enterprise robot message template key
DEFAULT_MSG_KEY = "sampleMarkdown"

# Business error codes meaning the access token itself was rejected
TOKEN_INVALID_API_CODES: frozenset[int] = frozenset({40001, 40014, 42001})
