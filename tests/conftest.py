"""
Shared test fixtures and pytest configuration.
"""

import httpx
import pytest
import numpy as np

from fxvol import config
from fxvol.gateway import GatewayClient

LIVE_URL = "https://bloomberg-gateway.example.test/api"


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure test reproducibility."""
    np.random.seed(42)
    yield


@pytest.fixture(autouse=True)
def no_mock_delay(monkeypatch):
    """The simulated gateway latency only slows tests down."""
    monkeypatch.setattr(config, "MOCK_DELAY", 0.0)
    monkeypatch.setattr(config, "DEV_MODE", False)
    monkeypatch.setattr(config, "FALLBACK_TO_MOCK", True)


@pytest.fixture
def make_client():
    """Build a GatewayClient backed by an httpx.MockTransport handler."""
    clients = []

    def _make(handler, base_url=LIVE_URL):
        client = GatewayClient(base_url=base_url, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
