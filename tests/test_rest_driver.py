"""
Tests for the REST client driver against a local aiohttp server.
"""

from __future__ import annotations

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer
from pydantic import ValidationError

from drivers import registry
from drivers.rest import RestClient, RestConfig


async def _serve(handler) -> LocalServer:
    app = web.Application()
    app.router.add_route("POST", "/{tail:.*}", handler)
    server = LocalServer(app)
    await server.start_server()
    return server


def test_registered_under_rest():
    assert registry.get("rest") == (RestConfig, RestClient)


def test_unknown_config_keys_rejected():
    with pytest.raises(ValidationError):
        RestConfig.model_validate({"base_url": "https://api.example.com", "bogus": 1})


def test_url_for_fills_id():
    client = RestClient("main", RestConfig(base_url="https://api.example.com/1.1/"))
    assert client.url_for("/statuses/retweet/{id}.json", 42) == "https://api.example.com/1.1/statuses/retweet/42.json"


@pytest.mark.asyncio
async def test_actions_post_to_templates_with_token():
    seen = []

    async def handler(request: web.Request) -> web.Response:
        seen.append((request.path_qs, request.headers.get("Authorization"), request.headers.get("X-Extra")))
        return web.json_response({"ok": True})

    server = await _serve(handler)
    client = RestClient(
        "main",
        RestConfig(base_url=str(server.make_url("/1.1")), token="secret-token-123", headers={"X-Extra": "yes"}),
    )
    await client.start()
    try:
        await client.favorite(1)
        await client.unfavorite(2)
        await client.retweet(3)
    finally:
        await client.close()
        await server.close()

    assert seen == [
        ("/1.1/favorites/create.json?id=1", "Bearer secret-token-123", "yes"),
        ("/1.1/favorites/destroy.json?id=2", "Bearer secret-token-123", "yes"),
        ("/1.1/statuses/retweet/3.json", "Bearer secret-token-123", "yes"),
    ]


@pytest.mark.asyncio
async def test_non_2xx_raises():
    async def handler(request: web.Request) -> web.Response:
        return web.Response(status=403, text="forbidden")

    server = await _serve(handler)
    client = RestClient("main", RestConfig(base_url=str(server.make_url(""))))
    await client.start()
    try:
        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await client.retweet(5)
        assert exc_info.value.status == 403
    finally:
        await client.close()
        await server.close()


@pytest.mark.asyncio
async def test_call_before_start_raises():
    client = RestClient("main", RestConfig(base_url="https://api.example.com"))
    with pytest.raises(RuntimeError):
        await client.favorite(1)
