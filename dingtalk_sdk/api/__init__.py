"""DingTalk API services (webhook robot and enterprise application)."""

from .blocking_enterprise import BlockingEnterpriseService
from .blocking_webhook import BlockingWebhookService
from .enterprise import EnterpriseService
from .webhook import WebhookService

__all__ = [
    "BlockingEnterpriseService",
    "BlockingWebhookService",
    "EnterpriseService",
    "WebhookService",
]
