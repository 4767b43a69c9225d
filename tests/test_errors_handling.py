import logging
from email.utils import format_datetime
from datetime import UTC, datetime

import pytest

from dingtalk_sdk.config import BodySnippetConfig
from dingtalk_sdk.errors import (
    DingTalkError,
    ErrorKind,
    HttpError,
    TransportError,
    TransportErrorCode,
)
from dingtalk_sdk.errors.handling import (
    body_snippet_for_error,
    classify_transport_error,
    log_error,
    parse_retry_after,
    validate_standard_api_response,
)
from dingtalk_sdk.utils.redact import REDACTION_MARKER


def _http(status: int, **kw) -> TransportError:
    return TransportError(TransportErrorCode.HTTP_STATUS, "boom", status=status, **kw)


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, ErrorKind.AUTH),
        (403, ErrorKind.AUTH),
        (404, ErrorKind.NOT_FOUND),
        (409, ErrorKind.CONFLICT),
        (412, ErrorKind.CONFLICT),
        (429, ErrorKind.RATE_LIMITED),
        (400, ErrorKind.TRANSPORT),
        (500, ErrorKind.TRANSPORT),
    ],
)
def test_status_table(status, kind):
    error = classify_transport_error(_http(status, request_id="req-1"))
    assert error.kind() is kind
    assert error.status() == status
    assert error.request_id() == "req-1"


def test_rate_limited_carries_retry_after_and_is_retryable():
    error = classify_transport_error(_http(429, retry_after=3.0))
    assert error.is_retryable()
    assert error.retry_after() == 3.0


@pytest.mark.parametrize("status", [401, 403, 404, 409, 412, 400])
def test_client_errors_are_not_retryable(status):
    assert not classify_transport_error(_http(status)).is_retryable()


@pytest.mark.parametrize("status", [500, 502, 503, 599])
def test_server_errors_are_retryable(status):
    error = classify_transport_error(_http(status))
    assert error.kind() is ErrorKind.TRANSPORT
    assert error.is_retryable()


@pytest.mark.parametrize(
    ("code", "retryable"),
    [
        (TransportErrorCode.TIMEOUT, True),
        (TransportErrorCode.DEADLINE_EXCEEDED, True),
        (TransportErrorCode.TRANSPORT, True),
        (TransportErrorCode.RETRY_BUDGET_EXHAUSTED, True),
        (TransportErrorCode.CIRCUIT_OPEN, True),
        (TransportErrorCode.INVALID_REQUEST, False),
    ],
)
def test_transport_codes_retryability(code, retryable):
    error = classify_transport_error(TransportError(code, "failed"))
    assert error.kind() is ErrorKind.TRANSPORT
    assert error.status() is None
    assert error.is_retryable() is retryable


def test_api_error_response_is_detected():
    body = '{"errcode":310000,"errmsg":"invalid"}'
    with pytest.raises(DingTalkError) as exc:
        validate_standard_api_response(body, BodySnippetConfig(enabled=True, max_bytes=4096))
    error = exc.value
    assert error.kind() is ErrorKind.API
    assert error.code() == 310000
    assert error.message() == "invalid"
    assert error.body_snippet() == body
    assert not error.is_retryable()
    assert "errcode" not in str(error)


def test_api_error_snippet_can_be_disabled():
    body = '{"errcode":310000,"errmsg":"invalid"}'
    with pytest.raises(DingTalkError) as exc:
        validate_standard_api_response(body, BodySnippetConfig(enabled=False))
    assert exc.value.body_snippet() is None


@pytest.mark.parametrize(
    "body", ['{"errcode":0,"errmsg":"ok"}', '{"success":true}', "not json", "[1,2]", ""]
)
def test_successful_or_unrecognized_bodies_pass(body):
    validate_standard_api_response(body, BodySnippetConfig())


def test_retryable_api_codes_are_configurable():
    body = '{"errcode":130101,"errmsg":"busy"}'
    with pytest.raises(DingTalkError) as exc:
        validate_standard_api_response(body, None)
    assert exc.value.is_retryable()

    with pytest.raises(DingTalkError) as exc:
        validate_standard_api_response(body, None, retryable_codes=frozenset({1}))
    assert not exc.value.is_retryable()


def test_body_snippet_truncates_then_redacts():
    body = '{"errcode":1,"errmsg":"x","access_token":"' + "s" * 100 + '"}'
    snippet = body_snippet_for_error(body, BodySnippetConfig(max_bytes=60))
    assert snippet is not None
    assert REDACTION_MARKER in snippet
    assert "s" * 10 not in snippet
    assert snippet.startswith('{"errcode":1,"errmsg":"x","access_token')
    assert len(snippet) < len(body)


def test_parse_retry_after_forms():
    assert parse_retry_after(None) is None
    assert parse_retry_after("") is None
    assert parse_retry_after("7") == 7.0
    assert parse_retry_after("-3") == 0.0
    assert parse_retry_after("soon") is None
    when = datetime(2030, 1, 1, 0, 0, 30, tzinfo=UTC)
    now = datetime(2030, 1, 1, 0, 0, 0, tzinfo=UTC).timestamp()
    assert parse_retry_after(format_datetime(when, usegmt=True), now=now) == pytest.approx(30.0)


def test_error_display_and_accessors():
    http = HttpError(status=401, message="denied", request_id="rid", body_snippet="secret body")
    error = DingTalkError.auth(http)
    assert str(error) == "Authentication failed: HTTP 401: denied [request-id: rid]"
    assert error.is_auth_error()
    assert error.body_snippet() == "secret body"
    assert "secret body" not in str(error)
    assert "kind=auth" in repr(error)
    assert str(DingTalkError.signature()) == "Signature generation failed"
    assert str(DingTalkError.api(5, "bad")) == "API error (code=5): bad"


@pytest.mark.parametrize(
    "factory",
    [
        lambda: DingTalkError.serialization("x"),
        lambda: DingTalkError.timestamp("x"),
        lambda: DingTalkError.signature(),
        lambda: DingTalkError.invalid_config("x"),
        lambda: DingTalkError.not_found(HttpError(404)),
        lambda: DingTalkError.conflict(HttpError(409)),
    ],
)
def test_non_transient_kinds_are_never_retryable(factory):
    error = factory()
    assert not error.is_retryable()
    assert error.retry_after() is None


def test_error_is_immutable():
    error = DingTalkError.api(1, "x")
    with pytest.raises(AttributeError):
        error.extra = 1  # type: ignore[attr-defined]
    with pytest.raises(AttributeError):
        del error._payload


def test_log_error_uses_structured_format(caplog):
    caplog.set_level(logging.DEBUG, logger="dingtalk_sdk")
    log_error("call failed", DingTalkError.api(310000, "invalid", "rid-9"))
    messages = [r.getMessage() for r in caplog.records]
    assert any(
        m.startswith("[API] call failed") and "code=310000" in m and "request_id=rid-9" in m
        for m in messages
    )
