"""Typed DingTalk API client.

Webhook robot messages, enterprise robot messages, contact and approval calls
over an asyncio (aiohttp) or blocking (httpx) transport.
"""

from .api import (
    BlockingEnterpriseService,
    BlockingWebhookService,
    EnterpriseService,
    WebhookService,
)
from .auth_token import AccessTokenCache, AppCredentials
from .client import BlockingClient, Client
from .config import BodySnippetConfig, ClientConfig
from .constants import SDK_VERSION as __version__
from .errors import DingTalkError, ErrorKind, HttpError
from .logging_config import LoggerConfigurator
from .rate import RetryConfig
from .signature import build_webhook_url, create_signature, current_timestamp_millis
from .types import *  # noqa: F403
from .types import __all__ as _types_all

__all__ = [
    "AccessTokenCache",
    "AppCredentials",
    "BlockingClient",
    "BlockingEnterpriseService",
    "BlockingWebhookService",
    "BodySnippetConfig",
    "Client",
    "ClientConfig",
    "DingTalkError",
    "EnterpriseService",
    "ErrorKind",
    "HttpError",
    "LoggerConfigurator",
    "RetryConfig",
    "WebhookService",
    "__version__",
    "build_webhook_url",
    "create_signature",
    "current_timestamp_millis",
    *_types_all,
]
