from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from dingtalk_sdk import BlockingClient
from dingtalk_sdk.errors import DingTalkError, ErrorKind, TransportError, TransportErrorCode
from dingtalk_sdk.types import ContactCreateDepartmentRequest, ContactGetDepartmentRequest


def _token(recorder, value: str = "T1") -> None:
    recorder.queue_json({"errcode": 0, "access_token": value, "expires_in": 7200})


def test_webhook_signed_send(recorder, config):
    recorder.queue_json({"errcode": 0, "errmsg": "ok"})
    with BlockingClient(config, http_client=recorder.client()) as client:
        body = client.webhook("tok", secret="SEC").send_text_message("hi", is_at_all=True)
    assert '"errcode"' in body
    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/robot/send"
    query = parse_qs(urlsplit(str(request.url)).query)
    assert query["access_token"] == ["tok"]
    assert "sign" in query and "timestamp" in query
    assert recorder.sent_json(0) == {
        "msgtype": "text",
        "text": {"content": "hi"},
        "at": {"isAtAll": True},
    }


def test_webhook_api_error(recorder, config):
    recorder.queue_json({"errcode": 300001, "errmsg": "token is not exist"})
    client = BlockingClient(config, http_client=recorder.client())
    with pytest.raises(DingTalkError) as exc:
        client.webhook("tok").send_markdown_message("t", "x")
    assert exc.value.code() == 300001


def test_enterprise_token_cached_across_calls(recorder, config):
    _token(recorder)
    recorder.queue_json({"errcode": 0, "result": {"dept_id": 5, "name": "R&D"}})
    recorder.queue_json({"errcode": 0, "result": {"dept_id": 6}})
    service = BlockingClient(config, http_client=recorder.client()).enterprise("k", "s", "r")
    department = service.contact_get_department(ContactGetDepartmentRequest(dept_id=5))
    created = service.contact_create_department(
        ContactCreateDepartmentRequest(name="New", parent_id=1)
    )
    assert department.name == "R&D"
    assert created.dept_id == 6
    assert len(recorder.requests) == 3
    assert recorder.requests[0].url.path == "/gettoken"
    assert recorder.requests[2].url.params["access_token"] == "T1"
    assert recorder.sent_json(2) == {"name": "New", "parent_id": 1}


def test_enterprise_robot_header(recorder, config):
    _token(recorder)
    recorder.queue_json({"processQueryKey": "pq"})
    service = BlockingClient(config, http_client=recorder.client()).enterprise("k", "s", "r")
    service.send_oto_message("user-1", "T", "x")
    request = recorder.requests[1]
    assert str(request.url) == "https://api.example.test/v1.0/robot/oToMessages/batchSend"
    assert request.headers["x-acs-dingtalk-access-token"] == "T1"
    assert request.headers["content-type"] == "application/json"


def test_retry_then_success(recorder, config):
    recorder.queue(httpx.Response(503, text="busy"))
    _token(recorder)
    service = BlockingClient(
        config.with_retry(2, 0.0), http_client=recorder.client()
    ).enterprise("k", "s", "r")
    assert service.get_access_token() == "T1"
    assert len(recorder.requests) == 2


def test_not_found_is_classified(recorder, config):
    recorder.queue(httpx.Response(404, json={"message": "no such robot"}))
    client = BlockingClient(config, http_client=recorder.client())
    with pytest.raises(DingTalkError) as exc:
        client.webhook("tok").send_text_message("x")
    assert exc.value.kind() is ErrorKind.NOT_FOUND
    assert not exc.value.is_retryable()


@pytest.mark.parametrize(
    ("failure", "code"),
    [
        (httpx.ConnectTimeout("slow"), TransportErrorCode.TIMEOUT),
        (httpx.ConnectError("refused"), TransportErrorCode.TRANSPORT),
    ],
)
def test_network_failures_become_retryable_transport_errors(recorder, config, failure, code):
    recorder.queue(failure)
    client = BlockingClient(config, http_client=recorder.client())
    with pytest.raises(DingTalkError) as exc:
        client.enterprise("k", "s", "r").get_access_token()
    error = exc.value
    assert error.kind() is ErrorKind.TRANSPORT
    assert error.is_retryable()
    assert isinstance(error.__cause__, TransportError)
    assert error.__cause__.code is code
