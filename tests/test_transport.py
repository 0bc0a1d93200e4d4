from __future__ import annotations

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pynojs._transport import HttpTransport, TransportResponse
from pynojs.config import EngineConfig
from pynojs.exceptions import NoJsTransportError


def test_payload_prefers_json_and_falls_back_to_text() -> None:
    assert TransportResponse(url="/a", status=200, text='{"a": 1}').payload() == {"a": 1}
    assert TransportResponse(url="/a", status=200, text="<p>hi</p>").payload() == "<p>hi</p>"


def test_json_raises_transport_error_on_invalid_body() -> None:
    response = TransportResponse(url="/a", status=200, text="nope")
    with pytest.raises(NoJsTransportError) as excinfo:
        response.json()
    assert excinfo.value.url == "/a"
    assert excinfo.value.status_code == 200


async def _echo(request: web.Request) -> web.Response:
    data = await request.post()
    return web.json_response({"method": request.method, "fields": dict(data)})


async def _fragment(_request: web.Request) -> web.Response:
    return web.Response(text="<p>{result.name}</p>", content_type="text/html")


async def _broken(_request: web.Request) -> web.Response:
    return web.Response(status=500, text="boom")


def _app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/echo", _echo)
    app.router.add_get("/fragment.html", _fragment)
    app.router.add_get("/broken", _broken)
    return app


@pytest.mark.asyncio
async def test_http_transport_round_trip() -> None:
    async with TestServer(_app()) as server:
        config = EngineConfig(base_url=str(server.make_url("/")))
        async with HttpTransport(config) as transport:
            fragment = await transport.request("/fragment.html")
            posted = await transport.request("/echo", method="post", data={"email": "a@b.com"})

    assert fragment.ok
    assert fragment.text == "<p>{result.name}</p>"
    assert fragment.content_type.startswith("text/html")
    assert posted.json() == {"method": "POST", "fields": {"email": "a@b.com"}}


@pytest.mark.asyncio
async def test_http_transport_raises_on_error_status() -> None:
    async with TestServer(_app()) as server:
        config = EngineConfig(base_url=str(server.make_url("/")))
        async with HttpTransport(config) as transport:
            with pytest.raises(NoJsTransportError) as excinfo:
                await transport.request("/broken")

    assert excinfo.value.status_code == 500
    assert excinfo.value.url.endswith("/broken")


@pytest.mark.asyncio
async def test_http_transport_wraps_connection_errors() -> None:
    async with TestServer(_app()) as server:
        url = str(server.make_url("/echo"))

    async with HttpTransport(EngineConfig(request_timeout=2.0)) as transport:
        with pytest.raises(NoJsTransportError) as excinfo:
            await transport.request(url)

    assert excinfo.value.status_code is None
