from __future__ import annotations

import logging

from dingtalk_sdk.logs import EVENT_TEMPLATES, reload_event_templates
from dingtalk_sdk.logs.logger import SdkLogger


def test_event_templates_loads() -> None:
    assert EVENT_TEMPLATES, "EVENT_TEMPLATES should not be empty"
    assert ("token", "issued") in EVENT_TEMPLATES
    assert ("http", "retry") in EVENT_TEMPLATES


def test_reload_idempotent() -> None:
    from dingtalk_sdk.logs import event_catalog

    before = set(event_catalog.EVENT_TEMPLATES.keys())
    reload_event_templates()
    assert set(event_catalog.EVENT_TEMPLATES.keys()) == before


def test_logger_template_and_fallback(caplog) -> None:  # type: ignore[no-untyped-def]
    log = SdkLogger("dingtalk_sdk.test_logger")
    caplog.set_level(logging.INFO)

    log.log_event("token", "issued", appkey="k1", expires_in=7200)
    log.log_event("custom_domain", "custom_action", extra_field=123)

    msgs = [r.message for r in caplog.records]
    assert any("Access token issued (appkey=k1, expires_in=7200)" in m for m in msgs)
    assert any("custom domain: custom action" in m for m in msgs)


def test_missing_template_field_keeps_raw_template(caplog) -> None:  # type: ignore[no-untyped-def]
    log = SdkLogger("dingtalk_sdk.test_logger2")
    caplog.set_level(logging.INFO)
    log.log_event("webhook", "send")
    assert any("{msgtype}" in r.message for r in caplog.records)


def test_disabled_level_emits_nothing(caplog) -> None:  # type: ignore[no-untyped-def]
    log = SdkLogger("dingtalk_sdk.test_logger3")
    log.set_level(logging.WARNING)
    caplog.set_level(logging.DEBUG)
    log.log_event("http", "request", level=logging.DEBUG, method="GET", url="https://x")
    assert not caplog.records


def test_logger_debug_alignment(caplog, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("DEBUG", "1")
    log = SdkLogger("dingtalk_sdk.test_logger4")
    caplog.set_level(logging.DEBUG)
    log.log_event("token", "cache_clear", appkey="k1")
    first = caplog.records[0].message
    assert first.startswith("token_cache_clear".ljust(32))
    assert first.endswith("(appkey=k1)")
