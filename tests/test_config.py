import pytest

from dingtalk_sdk.config import BodySnippetConfig, ClientConfig
from dingtalk_sdk.errors import DingTalkError, ErrorKind
from dingtalk_sdk.rate import RetryConfig


def test_defaults():
    config = ClientConfig()
    assert config.webhook_base_url == "https://oapi.dingtalk.com/"
    assert config.enterprise_base_url == "https://api.dingtalk.com/"
    assert config.retry is None
    assert config.cache_access_token is True
    assert config.token_refresh_margin == 120
    assert config.body_snippet == BodySnippetConfig(enabled=True, max_bytes=4096)
    assert config.retryable_api_codes == frozenset({130101, 130102})


def test_base_urls_are_normalized():
    config = ClientConfig(webhook_base_url=" https://proxy.local/oapi/ ")
    assert config.webhook_base_url == "https://proxy.local/oapi"


def test_invalid_base_url_fails_at_construction():
    with pytest.raises(DingTalkError) as exc:
        ClientConfig(enterprise_base_url="https://api.dingtalk.com/?x=1")
    assert exc.value.kind() is ErrorKind.INVALID_CONFIG


@pytest.mark.parametrize(
    "changes",
    [
        {"request_timeout": 0},
        {"connect_timeout": -1},
        {"total_timeout": 0},
        {"token_refresh_margin": -1},
        {"body_snippet": BodySnippetConfig(max_bytes=-1)},
    ],
)
def test_invalid_values_rejected(changes):
    with pytest.raises(DingTalkError):
        ClientConfig(**changes)


def test_with_retry_and_evolve_return_new_configs():
    base = ClientConfig()
    retried = base.with_retry(3, 0.5)
    assert retried.retry == RetryConfig(max_retries=3, base_backoff=0.5)
    assert base.retry is None
    evolved = retried.evolve(client_name="bot/1.0")
    assert evolved.client_name == "bot/1.0"
    assert evolved.retry == retried.retry


def test_user_agent_headers_merge_defaults():
    config = ClientConfig(client_name="bot/1.0", default_headers={"X-Trace": "1"})
    headers = config.user_agent_headers
    assert headers["User-Agent"] == "bot/1.0"
    assert headers["X-Trace"] == "1"


def test_from_env(monkeypatch):
    monkeypatch.setenv("DINGTALK_WEBHOOK_BASE_URL", "https://proxy.local/oapi/")
    monkeypatch.setenv("DINGTALK_REQUEST_TIMEOUT", "3.5")
    monkeypatch.setenv("DINGTALK_MAX_RETRIES", "4")
    monkeypatch.setenv("DINGTALK_CACHE_ACCESS_TOKEN", "false")
    monkeypatch.setenv("DINGTALK_BODY_SNIPPET", "0")
    monkeypatch.setenv("DINGTALK_RETRYABLE_API_CODES", "1, 2,3")
    config = ClientConfig.from_env()
    assert config.webhook_base_url == "https://proxy.local/oapi"
    assert config.request_timeout == 3.5
    assert config.retry == RetryConfig(max_retries=4, base_backoff=0.2)
    assert config.cache_access_token is False
    assert config.body_snippet.enabled is False
    assert config.retryable_api_codes == frozenset({1, 2, 3})


def test_from_env_rejects_bad_numbers(monkeypatch):
    monkeypatch.setenv("DINGTALK_MAX_RETRIES", "many")
    with pytest.raises(DingTalkError) as exc:
        ClientConfig.from_env()
    assert exc.value.kind() is ErrorKind.INVALID_CONFIG


def test_type_errors_become_invalid_config():
    with pytest.raises(DingTalkError) as exc:
        ClientConfig(request_timeout="soon")
    assert exc.value.kind() is ErrorKind.INVALID_CONFIG
    assert "request_timeout" in exc.value.message()


def test_config_is_frozen():
    config = ClientConfig()
    with pytest.raises(Exception):
        config.client_name = "other"  # type: ignore[misc]
