import base64
import hashlib
import hmac
from urllib.parse import parse_qs, unquote, urlsplit

import pytest

from dingtalk_sdk import signature
from dingtalk_sdk.errors import DingTalkError, ErrorKind
from dingtalk_sdk.signature import (
    build_webhook_url,
    create_signature,
    current_timestamp_millis,
)


def test_create_signature_regression_vector():
    assert (
        create_signature("1700000000000", "secret")
        == "OuzzJR5%2BxZ4%2FEYwqtNt6sMYZQMTa%2FHEGvc9miJe7XzY%3D"
    )


def test_create_signature_decodes_to_hmac_digest():
    sign = create_signature("1700000000001", "SECabc")
    raw = base64.b64decode(unquote(sign))
    expected = hmac.new(b"SECabc", b"1700000000001\nSECabc", hashlib.sha256).digest()
    assert raw == expected


def test_create_signature_is_deterministic():
    assert create_signature("1", "k") == create_signature("1", "k")
    assert create_signature("1", "k") != create_signature("2", "k")


def test_current_timestamp_millis_is_decimal_ms():
    value = current_timestamp_millis()
    assert value.isdigit()
    assert len(value) >= 13


def test_current_timestamp_before_epoch_raises(monkeypatch):
    monkeypatch.setattr(signature.time, "time_ns", lambda: -5_000_000)
    with pytest.raises(DingTalkError) as exc:
        current_timestamp_millis()
    assert exc.value.kind() is ErrorKind.TIMESTAMP
    assert not exc.value.is_retryable()


def test_build_webhook_url_without_secret_contains_token_only():
    url = build_webhook_url("https://oapi.dingtalk.com/", "token-123")
    assert url == "https://oapi.dingtalk.com/robot/send?access_token=token-123"


def test_build_webhook_url_with_secret_round_trips_signature(monkeypatch):
    monkeypatch.setattr(signature, "current_timestamp_millis", lambda: "1700000000000")
    url = build_webhook_url("https://proxy.local/dingtalk", "tok", "secret")
    parts = urlsplit(url)
    assert parts.path == "/dingtalk/robot/send"
    query = parse_qs(parts.query)
    assert query["access_token"] == ["tok"]
    assert query["timestamp"] == ["1700000000000"]
    # parse_qs decodes once; the decoded value equals the unencoded base64 signature.
    assert query["sign"] == [unquote(create_signature("1700000000000", "secret"))]
