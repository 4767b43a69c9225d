"""Client configuration model.

``ClientConfig`` is an immutable pydantic model describing how a client talks
to DingTalk. Base URLs are validated and normalized on construction, so an
invalid value fails early with an ``INVALID_CONFIG`` error rather than on the
first request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .constants import (
    BODY_SNIPPET_MAX_BYTES,
    CONNECT_TIMEOUT_SECONDS,
    DEFAULT_CLIENT_NAME,
    DEFAULT_ENTERPRISE_BASE_URL,
    DEFAULT_RETRYABLE_API_CODES,
    DEFAULT_WEBHOOK_BASE_URL,
    REQUEST_TIMEOUT_SECONDS,
    TOKEN_REFRESH_MARGIN_SECONDS,
)
from .errors.types import DingTalkError
from .rate.retry_policies import RetryConfig
from .utils.url import normalize_base_url


@dataclass(frozen=True)
class BodySnippetConfig:
    """Controls whether and how much of an error body is kept on errors."""

    enabled: bool = True
    max_bytes: int = BODY_SNIPPET_MAX_BYTES


class ClientConfig(BaseModel):
    """Settings shared by the async and blocking clients.

    Attributes:
        client_name: Value of the ``User-Agent`` header.
        request_timeout: Per-attempt timeout in seconds.
        connect_timeout: TCP connect timeout in seconds.
        total_timeout: Optional deadline in seconds across all retry attempts.
        no_system_proxy: Ignore proxy settings from the environment.
        webhook_base_url: Base URL of the legacy ``oapi`` host (webhook,
            ``gettoken`` and ``topapi`` endpoints).
        enterprise_base_url: Base URL of the ``v1.0`` robot API host.
        retry: Retry policy handed to the transport; ``None`` disables retries.
        retry_non_idempotent: Also retry POST requests.
        default_headers: Extra headers added to every request.
        cache_access_token: Keep issued enterprise tokens in memory.
        token_refresh_margin: Seconds before expiry a cached token is
            considered stale.
        body_snippet: Body snippet capture for errors.
        retryable_api_codes: Business error codes reported as retryable.
    """

    model_config = ConfigDict(frozen=True)

    client_name: str = DEFAULT_CLIENT_NAME
    request_timeout: float = Field(default=REQUEST_TIMEOUT_SECONDS, gt=0)
    connect_timeout: float = Field(default=CONNECT_TIMEOUT_SECONDS, gt=0)
    total_timeout: float | None = Field(default=None, gt=0)
    no_system_proxy: bool = False
    webhook_base_url: str = Field(default=DEFAULT_WEBHOOK_BASE_URL, validate_default=True)
    enterprise_base_url: str = Field(default=DEFAULT_ENTERPRISE_BASE_URL, validate_default=True)
    retry: RetryConfig | None = None
    retry_non_idempotent: bool = False
    default_headers: dict[str, str] = Field(default_factory=dict)
    cache_access_token: bool = True
    token_refresh_margin: float = Field(default=TOKEN_REFRESH_MARGIN_SECONDS, ge=0)
    body_snippet: BodySnippetConfig = Field(default_factory=BodySnippetConfig)
    retryable_api_codes: frozenset[int] = DEFAULT_RETRYABLE_API_CODES

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise DingTalkError.invalid_config(problems) from e

    @field_validator("webhook_base_url", "enterprise_base_url", mode="after")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Normalize a base URL; invalid values raise ``INVALID_CONFIG``."""
        return normalize_base_url(v)

    @model_validator(mode="after")
    def validate_body_snippet(self) -> ClientConfig:
        if self.body_snippet.max_bytes < 0:
            raise ValueError("body_snippet.max_bytes must be >= 0")
        return self

    def evolve(self, **changes: Any) -> ClientConfig:
        """Return a copy with ``changes`` applied (validated again)."""
        return type(self)(**{**dict(self), **changes})

    def with_retry(self, max_retries: int, base_backoff: float) -> ClientConfig:
        return self.evolve(retry=RetryConfig(max_retries=max_retries, base_backoff=base_backoff))

    @property
    def user_agent_headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.client_name, "Accept": "application/json"}
        headers.update(self.default_headers)
        return headers

    @classmethod
    def from_env(cls, prefix: str = "DINGTALK_") -> ClientConfig:
        """Build a config from ``{prefix}*`` environment variables.

        Recognized: ``CLIENT_NAME``, ``REQUEST_TIMEOUT``, ``CONNECT_TIMEOUT``,
        ``TOTAL_TIMEOUT``, ``NO_SYSTEM_PROXY``, ``WEBHOOK_BASE_URL``,
        ``ENTERPRISE_BASE_URL``, ``MAX_RETRIES``, ``BASE_BACKOFF``,
        ``RETRY_NON_IDEMPOTENT``, ``CACHE_ACCESS_TOKEN``,
        ``TOKEN_REFRESH_MARGIN``, ``BODY_SNIPPET``, ``BODY_SNIPPET_MAX_BYTES``,
        ``RETRYABLE_API_CODES`` (comma separated).
        """
        env = _EnvReader(prefix)
        kwargs: dict[str, object] = {}
        for name, key in (
            ("client_name", "CLIENT_NAME"),
            ("webhook_base_url", "WEBHOOK_BASE_URL"),
            ("enterprise_base_url", "ENTERPRISE_BASE_URL"),
        ):
            value = env.str(key)
            if value is not None:
                kwargs[name] = value
        for name, key in (
            ("request_timeout", "REQUEST_TIMEOUT"),
            ("connect_timeout", "CONNECT_TIMEOUT"),
            ("total_timeout", "TOTAL_TIMEOUT"),
            ("token_refresh_margin", "TOKEN_REFRESH_MARGIN"),
        ):
            value = env.float(key)
            if value is not None:
                kwargs[name] = value
        for name, key in (
            ("no_system_proxy", "NO_SYSTEM_PROXY"),
            ("retry_non_idempotent", "RETRY_NON_IDEMPOTENT"),
            ("cache_access_token", "CACHE_ACCESS_TOKEN"),
        ):
            value = env.bool(key)
            if value is not None:
                kwargs[name] = value

        max_retries = env.int("MAX_RETRIES")
        if max_retries is not None:
            base_backoff = env.float("BASE_BACKOFF")
            kwargs["retry"] = RetryConfig(
                max_retries=max_retries,
                base_backoff=RetryConfig.standard().base_backoff
                if base_backoff is None
                else base_backoff,
            )

        snippet_enabled = env.bool("BODY_SNIPPET")
        snippet_bytes = env.int("BODY_SNIPPET_MAX_BYTES")
        if snippet_enabled is not None or snippet_bytes is not None:
            default = BodySnippetConfig()
            kwargs["body_snippet"] = BodySnippetConfig(
                enabled=default.enabled if snippet_enabled is None else snippet_enabled,
                max_bytes=default.max_bytes if snippet_bytes is None else snippet_bytes,
            )

        codes = env.str("RETRYABLE_API_CODES")
        if codes is not None:
            try:
                kwargs["retryable_api_codes"] = frozenset(
                    int(item) for item in codes.split(",") if item.strip()
                )
            except ValueError as e:
                raise DingTalkError.invalid_config(
                    f"{prefix}RETRYABLE_API_CODES must be comma separated integers"
                ) from e
        return cls(**kwargs)


class _EnvReader:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix

    def str(self, key: str) -> str | None:
        value = os.getenv(self._prefix + key)
        if value is None or not value.strip():
            return None
        return value.strip()

    def int(self, key: str) -> int | None:
        raw = self.str(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError as e:
            raise DingTalkError.invalid_config(f"{self._prefix}{key} must be an integer") from e

    def float(self, key: str) -> float | None:
        raw = self.str(key)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError as e:
            raise DingTalkError.invalid_config(f"{self._prefix}{key} must be a number") from e

    def bool(self, key: str) -> bool | None:
        raw = self.str(key)
        if raw is None:
            return None
        return raw.lower() in ("true", "1", "yes", "on")


__all__ = ["BodySnippetConfig", "ClientConfig"]
