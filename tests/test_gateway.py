"""
Tests for the gateway client and the surface fetcher.

All HTTP goes through httpx.MockTransport; nothing touches the network.
"""

import json
import logging
import threading

import httpx
import pytest
from fxvol import config, gateway
from fxvol.gateway import SurfaceFetchError, fetch_volatility_surface
from fxvol.surface import VolatilitySurface


def ok_handler(recorded):
    lock = threading.Lock()

    def handler(request):
        with lock:
            recorded.append(request)
        if request.url.path.endswith("/health"):
            return httpx.Response(200, json={"status": "ok"})
        return httpx.Response(200, json={"data": []})

    return handler


class TestHealthCheck:

    def test_connected_on_200(self, make_client):
        client = make_client(lambda request: httpx.Response(200))
        assert client.check_connection() is True

    def test_disconnected_on_error_status(self, make_client):
        client = make_client(lambda request: httpx.Response(503))
        assert client.check_connection() is False

    def test_disconnected_on_timeout(self, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)
        assert client.check_connection() is False

    def test_disconnected_on_connect_error(self, make_client):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        assert client.check_connection() is False

    def test_health_path_under_base(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        client.check_connection()
        assert requests[0].method == "GET"
        assert requests[0].url.path == "/api/health"


class TestReferenceRequests:

    def test_payload(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        client.fetch_reference(["EURUSDV1M Curncy"])
        body = json.loads(requests[0].content)
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/api/bloomberg/reference"
        assert body == {"securities": ["EURUSDV1M Curncy"], "fields": ["PX_LAST", "PX_BID", "PX_ASK"]}

    def test_batches_respect_limit(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        securities = [f"SEC{i}" for i in range(221)]
        results = client.fetch_reference_batches(securities)
        assert len(results) == 5
        sizes = sorted(len(json.loads(r.content)["securities"]) for r in requests)
        assert sizes == [21, 50, 50, 50, 50]
        sent = sorted(s for r in requests for s in json.loads(r.content)["securities"])
        assert sent == sorted(securities)

    def test_empty_input(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        assert client.fetch_reference_batches([]) == []
        assert requests == []

    def test_status_error_wrapped(self, make_client):
        client = make_client(lambda request: httpx.Response(500))
        with pytest.raises(SurfaceFetchError):
            client.fetch_reference(["X"])

    def test_invalid_json_wrapped(self, make_client):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(SurfaceFetchError):
            client.fetch_reference(["X"])


class TestFetchSurface:

    def test_dev_mode_skips_gateway(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        surface = fetch_volatility_surface("GBPUSD", "Live", client=client, dev_mode=True)
        assert isinstance(surface, VolatilitySurface)
        assert surface.shape == (13, 17)
        assert requests == []

    def test_non_gateway_url_uses_mock(self, make_client):
        requests = []
        client = make_client(ok_handler(requests), base_url="http://localhost:8080/api")
        surface = fetch_volatility_surface("GBPUSD", client=client)
        assert len(surface.tenors) == 13
        assert len(surface.deltas) == 17
        assert requests == []

    def test_gateway_path_requests_all_securities(self, make_client):
        requests = []
        client = make_client(ok_handler(requests))
        surface = fetch_volatility_surface("EURUSD", "Latest EOD", client=client)
        assert surface.shape == (13, 17)
        assert len(requests) == 5
        sent = [s for r in requests for s in json.loads(r.content)["securities"]]
        assert len(sent) == 17 * 13

    def test_gateway_failure_falls_back(self, make_client):
        client = make_client(lambda request: httpx.Response(502))
        surface = fetch_volatility_surface("EURUSD", client=client)
        assert surface.shape == (13, 17)
        assert surface.matrix.min() >= 5.0
        assert surface.matrix.max() <= 20.0

    def test_gateway_failure_raises_without_fallback(self, make_client):
        client = make_client(lambda request: httpx.Response(502))
        with pytest.raises(SurfaceFetchError):
            fetch_volatility_surface("EURUSD", client=client, fallback_to_mock=False)

    def test_fallback_setting_from_config(self, make_client, monkeypatch):
        monkeypatch.setattr(config, "FALLBACK_TO_MOCK", False)

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(SurfaceFetchError):
            fetch_volatility_surface("EURUSD", client=client)

    def test_new_surface_each_call(self, make_client):
        client = make_client(ok_handler([]), base_url="http://localhost/api")
        s1 = fetch_volatility_surface("GBPUSD", client=client)
        s2 = fetch_volatility_surface("GBPUSD", client=client)
        assert s1 is not s2
        assert s1.shape == s2.shape

    def test_invalid_pair(self, make_client):
        client = make_client(ok_handler([]))
        with pytest.raises(ValueError):
            fetch_volatility_surface("XXXYYY", client=client)

    def test_invalid_mode(self, make_client):
        client = make_client(ok_handler([]))
        with pytest.raises(ValueError):
            fetch_volatility_surface("EURUSD", "Intraday", client=client)

    def test_non_http_failure_falls_back(self, make_client):
        def handler(request):
            raise OSError("socket layer failure")

        client = make_client(handler)
        surface = fetch_volatility_surface("EURUSD", client=client)
        assert surface.shape == (13, 17)

    def test_non_http_failure_raises_fetch_error_without_fallback(self, make_client):
        def handler(request):
            raise OSError("socket layer failure")

        client = make_client(handler)
        with pytest.raises(SurfaceFetchError) as excinfo:
            fetch_volatility_surface("EURUSD", client=client, fallback_to_mock=False)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_logs_identifier_mix(self, make_client, caplog):
        client = make_client(ok_handler([]))
        with caplog.at_level(logging.DEBUG, logger="fxvol.gateway"):
            fetch_volatility_surface("EURUSD", client=client)
        assert "EURUSD: 13 ATM, 104 RR, 104 BF identifiers" in caplog.text


class TestMockDelay:

    @pytest.fixture
    def sleeps(self, monkeypatch):
        calls = []
        monkeypatch.setattr(gateway.time, "sleep", calls.append)
        return calls

    def test_mock_path_sleeps_for_delay(self, make_client, sleeps):
        client = make_client(ok_handler([]))
        fetch_volatility_surface("EURUSD", client=client, dev_mode=True, delay=0.5)
        assert sleeps == [0.5]

    def test_mock_path_uses_configured_delay(self, make_client, sleeps, monkeypatch):
        monkeypatch.setattr(config, "MOCK_DELAY", 0.25)
        client = make_client(ok_handler([]), base_url="http://localhost:8080/api")
        fetch_volatility_surface("EURUSD", client=client)
        assert sleeps == [0.25]

    def test_gateway_path_does_not_sleep(self, make_client, sleeps):
        client = make_client(ok_handler([]))
        fetch_volatility_surface("EURUSD", client=client, delay=0.5)
        assert sleeps == []
