"""Tests for single relay requests."""

import asyncio

import httpx
import pytest

from og_preview.extractors import fetch_via_relay
from og_preview.extractors.fetch import ACCEPT_HEADER, unwrap_envelope
from og_preview.relays import RelayRegistry
from tests.conftest import OG_PAGE, RelayStub

TARGET = "https://example.com/post?id=7"


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFetchViaRelay:
    """Response handling per relay kind."""

    @pytest.mark.asyncio
    async def test_envelope_relay_unwraps_contents(self):
        stub = RelayStub(lambda request: httpx.Response(200, json={"contents": OG_PAGE, "status": {}}))
        async with client_for(stub) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 0, timeout=5.0)

        assert response.ok
        assert response.body == OG_PAGE
        assert response.status == 200
        assert stub.requests[0].url.params["url"] == TARGET

    @pytest.mark.asyncio
    async def test_raw_relay_returns_text(self):
        stub = RelayStub(lambda request: httpx.Response(200, text=OG_PAGE))
        async with client_for(stub) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=5.0)

        assert response.ok
        assert response.body == OG_PAGE
        assert stub.requests[0].url.host == "api.codetabs.com"
        assert stub.requests[0].url.params["quest"] == TARGET

    @pytest.mark.asyncio
    async def test_sends_accept_header(self):
        stub = RelayStub(lambda request: httpx.Response(200, text=OG_PAGE))
        async with client_for(stub) as client:
            await fetch_via_relay(client, RelayRegistry(), TARGET, 2, timeout=5.0)

        assert stub.requests[0].method == "GET"
        assert stub.requests[0].headers["Accept"] == ACCEPT_HEADER

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
    async def test_non_2xx_is_an_error(self, status: int):
        async with client_for(lambda request: httpx.Response(status, text=OG_PAGE)) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=5.0)

        assert not response.ok
        assert response.error == str(status)
        assert response.status == status
        assert response.body is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"text": "not json"},
        {"json": ["a", "list"]},
        {"json": {"contents": None}},
        {"json": {"other": "<html></html>"}},
    ])
    async def test_bad_envelope(self, payload: dict):
        async with client_for(lambda request: httpx.Response(200, **payload)) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 0, timeout=5.0)

        assert response.error == "envelope"
        assert response.body is None


class TestTransportErrors:
    """Transport failures come back as reasons, never exceptions."""

    @pytest.mark.asyncio
    async def test_httpx_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with client_for(handler) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=5.0)
        assert response.error == "timeout"

    @pytest.mark.asyncio
    async def test_slow_relay_is_aborted(self):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200, text=OG_PAGE)

        async with client_for(handler) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=0.05)
        assert response.error == "timeout"

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with client_for(handler) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=5.0)
        assert response.error == "connection"

    @pytest.mark.asyncio
    async def test_other_transport_error(self):
        def handler(request):
            raise httpx.RemoteProtocolError("bad frame", request=request)

        async with client_for(handler) as client:
            response = await fetch_via_relay(client, RelayRegistry(), TARGET, 1, timeout=5.0)
        assert response.error == "remoteprotocolerror"

    @pytest.mark.asyncio
    async def test_bad_relay_index_raises(self):
        async with client_for(lambda request: httpx.Response(200)) as client:
            with pytest.raises(IndexError):
                await fetch_via_relay(client, RelayRegistry(), TARGET, 5, timeout=5.0)


class TestUnwrapEnvelope:
    """Envelope body extraction."""

    def test_field_present(self):
        assert unwrap_envelope({"contents": "<p>x</p>"}, "contents") == "<p>x</p>"

    @pytest.mark.parametrize("payload", [None, "text", [], {"contents": 1}, {}])
    def test_unusable_payloads(self, payload):
        assert unwrap_envelope(payload, "contents") is None
