from __future__ import annotations

import os

import pytest

from dingtalk_sdk.config import ClientConfig
from tests.fixtures.fake_http import FakeSession, Recorder

# Keep log messages in their short human form regardless of the developer shell.
os.environ.pop("DEBUG", None)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        webhook_base_url="https://oapi.example.test",
        enterprise_base_url="https://api.example.test",
    )
