from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from intro.config import get_settings
from intro.main import app, metrics_app
from intro.observability.metrics import reset_metrics
from intro.services.device_service import reset_device_registry


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_VERSION", "9.9.9-test")
    monkeypatch.setenv("DEVICE_TYPE", "router")
    get_settings.cache_clear()
    reset_metrics()
    reset_device_registry()

    yield

    reset_metrics()
    reset_device_registry()
    get_settings.cache_clear()


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def metrics_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=metrics_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
