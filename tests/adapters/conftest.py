"""Shared fixtures for HTTP adapter tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from thorbond.adapters.http_resilience import ResilientClient
from thorbond.config.http_resilience import ResilienceConfig

Handler = Callable[[httpx.Request], httpx.Response]
ClientFactoryBuilder = Callable[[Handler], Callable[[ResilienceConfig], ResilientClient]]


def _make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

    return factory


@pytest.fixture
def client_factory() -> ClientFactoryBuilder:
    return _make_client_factory
