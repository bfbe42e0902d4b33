"""Pytest fixtures and shared test configuration.

Fixtures:
    - gateway_config: Config with a test API key
    - fake_provider: Recording stand-in for the OpenAI provider
    - app: FastAPI app wired to the fake provider
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.gateway.config import GatewayConfig
from tests.fakes import FakeProvider, page_handler


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Gateway config with a test key and default sampling settings."""
    return GatewayConfig(api_key="sk-test-key", base_url=None)


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider that answers "hello!"."""
    return FakeProvider()


@pytest.fixture
def app(gateway_config: GatewayConfig, fake_provider: FakeProvider) -> FastAPI:
    """App wired to the fake provider and canned web pages."""
    return create_app(
        gateway_config,
        provider=fake_provider,
        fetch_transport=httpx.MockTransport(page_handler),
    )


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
