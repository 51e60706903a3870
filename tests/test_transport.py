from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import aiohttp
import pytest
from aiohttp import test_utils, web

from pylocust._transport import HttpTransport
from pylocust.exceptions import FetchError, LocustTransportError

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _app(handler: Handler) -> web.Application:
    app = web.Application()
    app.router.add_get("/json", handler)
    return app


@pytest.mark.asyncio
async def test_get_json_returns_decoded_body() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.json_response({"status": "success", "lat": 52.37, "lon": 4.89})

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=5.0)
        body = await transport.get_json(str(server.make_url("/json")))

    assert body == {"status": "success", "lat": 52.37, "lon": 4.89}


@pytest.mark.asyncio
async def test_non_success_status_raises_with_status_code() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="busy")

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=5.0)
        with pytest.raises(LocustTransportError) as excinfo:
            await transport.get_json(str(server.make_url("/json")))

    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value, FetchError)


@pytest.mark.asyncio
async def test_invalid_json_raises() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(text="<html>rate limited</html>", content_type="text/html")

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=5.0)
        with pytest.raises(LocustTransportError, match="Invalid JSON"):
            await transport.get_json(str(server.make_url("/json")))


@pytest.mark.asyncio
async def test_body_that_is_not_utf8_raises() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(body=b'{"lat": 1.0, "lon": \xff}', content_type="application/json", charset="utf-8")

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=5.0)
        with pytest.raises(LocustTransportError, match="not valid UTF-8"):
            await transport.get_json(str(server.make_url("/json")))


@pytest.mark.asyncio
async def test_slow_provider_hits_timeout() -> None:
    async def handler(_request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.json_response({"lat": 0, "lon": 0})

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=0.05)
        with pytest.raises(LocustTransportError, match="timed out"):
            await transport.get_json(str(server.make_url("/json")))


@pytest.mark.asyncio
async def test_connection_failure_raises() -> None:
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(session, timeout=2.0)
        with pytest.raises(LocustTransportError, match="failed"):
            await transport.get_json("http://127.0.0.1:1/json")
