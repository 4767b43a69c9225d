import logging
import threading

import pytest

from dingtalk_sdk.auth_token import AccessTokenCache, CachedToken, normalize_token_ttl


class _Clock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_get_on_empty_cache_returns_none():
    assert AccessTokenCache(refresh_margin=0).get() is None


def test_cache_honors_refresh_margin():
    clock = _Clock()
    cache = AccessTokenCache(refresh_margin=120, clock=clock)
    cache.store("tok", 7200)
    assert cache.get() == "tok"
    clock.now += 7200 - 121
    assert cache.get() == "tok"
    clock.now += 1  # now + margin == expires_at
    assert cache.get() is None


def test_ttl_floor_and_default():
    assert normalize_token_ttl(5) == 30
    assert normalize_token_ttl(600) == 600
    assert normalize_token_ttl(None) == 7200
    assert normalize_token_ttl(0) == 7200
    assert normalize_token_ttl(-10) == 7200


def test_short_ttl_is_floored_to_minimum():
    clock = _Clock()
    cache = AccessTokenCache(refresh_margin=0, clock=clock)
    cache.store("tok", 1)
    clock.now += 29
    assert cache.get() == "tok"
    clock.now += 1
    assert cache.get() is None


@pytest.mark.parametrize("margin", [30, 60])
def test_floored_ttl_within_refresh_margin_is_never_served(margin):
    cache = AccessTokenCache(refresh_margin=margin, clock=_Clock())
    cache.store("tok", 1)
    assert cache.get() is None



def test_store_replaces_entry_and_clear_drops_it():
    cache = AccessTokenCache(refresh_margin=0)
    cache.store("first", 600)
    cache.store("second", 600)
    assert cache.get() == "second"
    cache.clear()
    assert cache.get() is None
    cache.clear()  # clearing an empty cache is a no-op


def test_cached_token_is_frozen():
    token = CachedToken(token="t", expires_at=1.0)
    with pytest.raises(AttributeError):
        token.token = "other"  # type: ignore[misc]


def test_concurrent_store_and_get_never_observe_partial_entries():
    cache = AccessTokenCache(refresh_margin=0)
    seen: list[str | None] = []
    tokens = {f"tok-{i}" for i in range(8)}

    def writer(tok: str) -> None:
        for _ in range(200):
            cache.store(tok, 600)

    def reader() -> None:
        for _ in range(200):
            seen.append(cache.get())

    threads = [threading.Thread(target=writer, args=(t,)) for t in tokens]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert all(value is None or value in tokens for value in seen)
    assert cache.get() in tokens


def test_store_logs_floored_ttl(caplog):
    caplog.set_level(logging.DEBUG, logger="dingtalk_sdk")
    AccessTokenCache(refresh_margin=0).store("tok", 1)
    assert any("ttl=30.0s" in r.getMessage() for r in caplog.records)
