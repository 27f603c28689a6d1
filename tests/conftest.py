"""Shared fixtures: stub providers and a TestClient wired to them."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from platerelay.config import RelayConfig
from stubs import StubLLMProvider, StubVisionProvider, make_client


@pytest.fixture
def vision() -> StubVisionProvider:
    return StubVisionProvider()


@pytest.fixture
def llm() -> StubLLMProvider:
    return StubLLMProvider()


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(relay_api_key="", annotate_timeout=5.0, format_timeout=5.0)


@pytest.fixture
def client(config, vision, llm) -> TestClient:
    return make_client(config, vision, llm)
