"""Retry configuration and Tenacity integration."""

from .retry_policies import NO_RETRY, RetryConfig, build_async_retrying, build_retrying

__all__ = ["NO_RETRY", "RetryConfig", "build_async_retrying", "build_retrying"]
