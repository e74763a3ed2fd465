import asyncio

import httpx
import pytest

import jobbrowser.rpc.transport as rpc_transport
from jobbrowser.rpc.transport import HttpTransport, build_headers
from jobbrowser.utils.exceptions import DecodeError, RpcTimeoutError, TransportError

URL = "https://kbase.test/services/job_browser_bff"


def _transport(handler) -> tuple[HttpTransport, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(URL, http_client=client), client


def test_build_headers_passes_token_verbatim() -> None:
    assert build_headers(None) == {"Content-Type": "application/json", "Accept": "application/json"}
    headers = build_headers("ABC123")
    assert headers["Authorization"] == "ABC123"


def test_transport_requires_url() -> None:
    with pytest.raises(ValueError):
        HttpTransport("")


@pytest.mark.asyncio
async def test_send_posts_body_and_returns_raw_reply() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"ok": true}')

    transport, client = _transport(handler)
    async with client:
        raw = await transport.send(b'{"x": 1}', headers=build_headers("tok"), timeout=5.0)

    assert raw == b'{"ok": true}'
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == URL
    assert seen[0].content == b'{"x": 1}'
    assert seen[0].headers["authorization"] == "tok"
    assert seen[0].headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_non_2xx_is_transport_error_with_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="service down")

    transport, client = _transport(handler)
    async with client:
        with pytest.raises(TransportError) as err:
            await transport.send(b"{}", headers=build_headers(None), timeout=5.0)

    assert not isinstance(err.value, DecodeError)
    assert err.value.status_code == 503
    assert err.value.retryable is True
    assert "service down" in str(err.value)


@pytest.mark.asyncio
async def test_non_2xx_with_jsonrpc_body_is_still_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"jsonrpc": "2.0", "id": "1", "error": {"code": -32000, "message": "x"}})

    transport, client = _transport(handler)
    async with client:
        with pytest.raises(TransportError) as err:
            await transport.send(b"{}", headers=build_headers(None), timeout=5.0)
    assert err.value.status_code == 500


@pytest.mark.asyncio
async def test_deadline_aborts_exchange_with_timeout_error() -> None:
    cancelled = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, content=b"{}")

    transport, client = _transport(handler)
    async with client:
        with pytest.raises(RpcTimeoutError) as err:
            await transport.send(b"{}", headers=build_headers(None), timeout=0.05)

    assert cancelled.is_set()
    assert err.value.timeout_seconds == 0.05
    assert not isinstance(err.value, TransportError)


@pytest.mark.asyncio
async def test_httpx_timeout_is_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    transport, client = _transport(handler)
    async with client:
        with pytest.raises(RpcTimeoutError):
            await transport.send(b"{}", headers=build_headers(None), timeout=5.0)


@pytest.mark.asyncio
async def test_network_error_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport, client = _transport(handler)
    async with client:
        with pytest.raises(TransportError) as err:
            await transport.send(b"{}", headers=build_headers(None), timeout=5.0)
    assert err.value.status_code is None
    assert err.value.code == "TRANSPORT_ERROR"


@pytest.mark.asyncio
async def test_owned_client_is_closed_after_each_send(monkeypatch) -> None:
    created: list[httpx.AsyncClient] = []
    real_async_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="nope")

    def fake_async_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        client = real_async_client(*args, **kwargs)
        created.append(client)
        return client

    monkeypatch.setattr(rpc_transport.httpx, "AsyncClient", fake_async_client)
    transport = HttpTransport(URL)
    with pytest.raises(TransportError):
        await transport.send(b"{}", headers=build_headers(None), timeout=5.0)

    assert len(created) == 1
    assert created[0].is_closed


@pytest.mark.asyncio
async def test_injected_client_stays_open() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{}")

    transport, client = _transport(handler)
    async with client:
        await transport.send(b"{}", headers=build_headers(None), timeout=5.0)
        assert not client.is_closed
