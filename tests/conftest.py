"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from smelt.llm.gateway import CompletionGateway
from smelt.models.llm import GatewayConfig
from tests.helpers import SleepRecorder


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("LOG_LEVEL", "INFO")
    os.environ.pop("OPENROUTER_API_KEY", None)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(fallback_api_key="sk-fallback")


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_gateway(
    gateway_config: GatewayConfig, sleep_recorder: SleepRecorder
) -> Callable[..., CompletionGateway]:
    """Factory for gateways backed by an httpx.MockTransport handler."""

    def factory(
        handler: Callable[[httpx.Request], Any],
        config: GatewayConfig | None = None,
        rng: Callable[[], float] = lambda: 0.0,
    ) -> CompletionGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CompletionGateway(
            config or gateway_config,
            http_client=client,
            sleep=sleep_recorder,
            rng=rng,
        )

    return factory
