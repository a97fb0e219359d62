"""
Root-level shared test fixtures.

Every test starts from a clean NEW_RELIC_* environment and a fresh config
singleton, so a developer's exported key never reaches a test.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from nrkeys.config import Config, reset_config

NEW_RELIC_ENV_VARS = [
    "NEW_RELIC_API_KEY",
    "NEW_RELIC_API_ENDPOINT",
    "NEW_RELIC_REGION",
    "NEW_RELIC_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove New Relic env vars and reset the config singleton."""
    for key in NEW_RELIC_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> Config:
    return Config(api_key="NRAK-TESTKEY1234", endpoint="https://nerdgraph.test/graphql", timeout=5.0)


def make_response(payload: Any = None, status_code: int = 200, text: str | None = None) -> MagicMock:
    """A stand-in for httpx.Response carrying a JSON (or raw text) body."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(payload)
    return resp


@pytest.fixture
def response_factory():
    return make_response
