"""Fixtures for API tests: a memory-backed terminal behind ASGITransport."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from possync.api.main import create_app
from possync.application.services import Terminal, build_terminal
from possync.config.settings import ConnectivitySettings, QueueSettings, Settings, SyncSettings


@pytest.fixture
def terminal(gateway, probe, kv, tmp_path) -> Terminal:
    settings = Settings(
        queue=QueueSettings(backend="memory", data_dir=tmp_path),
        connectivity=ConnectivitySettings(probe="manual"),
        sync=SyncSettings(backoff_initial=0.01, backoff_max=0.05),
    )
    return build_terminal(settings, gateway=gateway, connectivity=probe, kv_store=kv)


@pytest.fixture
def app(terminal):
    return create_app(terminal)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sale_body() -> dict:
    return {
        "items": [
            {"productName": "Basmati Rice 10kg", "productId": "P-100", "quantity": 2, "price": 18.5},
            {"productName": "Ghee 1L", "quantity": 1, "price": 9.99},
        ],
        "total": 46.99,
        "customerName": "Walk-in",
        "paymentMethod": "Cash",
    }
