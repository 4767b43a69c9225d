"""Webhook robot request signing.

DingTalk robots configured with "additional signature" security expect two
extra query parameters: ``timestamp`` (milliseconds since the epoch) and
``sign``, the base64 HMAC-SHA256 of ``"{timestamp}\\n{secret}"`` keyed by the
secret, percent-encoded for the query string.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from urllib.parse import quote

from .errors.types import DingTalkError
from .utils.url import append_query, endpoint_url


def current_timestamp_millis() -> str:
    """Return the current time as decimal milliseconds since the epoch.

    Raises:
        DingTalkError: ``TIMESTAMP`` if the system clock reads before the epoch.
    """
    millis = time.time_ns() // 1_000_000
    if millis < 0:
        raise DingTalkError.timestamp("system clock is before the UNIX epoch")
    return str(millis)


def _sign_hmac_sha256(secret: str, content: str) -> bytes:
    try:
        mac = hmac.new(secret.encode("utf-8"), content.encode("utf-8"), hashlib.sha256)
    except (TypeError, ValueError) as e:
        raise DingTalkError.signature() from e
    return mac.digest()


def create_signature(timestamp: str, secret: str) -> str:
    """Sign ``timestamp`` with ``secret`` as DingTalk robots expect.

    The result is deterministic for fixed inputs and already percent-encoded.
    """
    string_to_sign = f"{timestamp}\n{secret}"
    digest = _sign_hmac_sha256(secret, string_to_sign)
    signature_base64 = base64.b64encode(digest).decode("ascii")
    return quote(signature_base64, safe="")


def build_webhook_url(base_url: str, token: str, secret: str | None = None) -> str:
    """Build the ``robot/send`` URL, signed when a secret is configured."""
    url = append_query(endpoint_url(base_url, ["robot", "send"]), [("access_token", token)])
    if secret is None:
        return url
    timestamp = current_timestamp_millis()
    sign = create_signature(timestamp, secret)
    # sign is already percent-encoded; appending it through urlencode would double-encode.
    return f"{url}&timestamp={timestamp}&sign={sign}"


__all__ = ["build_webhook_url", "create_signature", "current_timestamp_millis"]
