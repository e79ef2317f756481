"""
Tests for the Fortress engine API client.
"""

import json

import httpx
import pytest

from fortress_admin.upstream.client import FortressAPIError, FortressClient


def _client(handler) -> FortressClient:
    return FortressClient(
        "http://engine.local",
        api_key="k3y",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_returns_json_and_sends_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers.get("x-fortress-key")
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"rps": 12})

    client = _client(handler)
    data = await client.get("/api/fortress/metrics", params={"window": "1h"})
    assert data == {"rps": 12}
    assert seen == {"key": "k3y", "params": {"window": "1h"}}
    await client.close()


@pytest.mark.asyncio
async def test_post_and_put_send_json_body():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.method, json.loads(request.content)))
        return httpx.Response(200, json={"status": "ok"})

    client = _client(handler)
    await client.post("/api/fortress/blocklist", {"ip": "203.0.113.9"})
    await client.put("/api/fortress/rules/7", {"enabled": False})
    assert bodies == [
        ("POST", {"ip": "203.0.113.9"}),
        ("PUT", {"enabled": False}),
    ]
    await client.close()


@pytest.mark.asyncio
async def test_delete_without_content_returns_none():
    client = _client(lambda request: httpx.Response(204))
    assert await client.delete("/api/fortress/blocklist/203.0.113.9") is None
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
async def test_non_2xx_raises_with_status(status):
    client = _client(lambda request: httpx.Response(status))
    with pytest.raises(FortressAPIError) as excinfo:
        await client.get("/api/fortress/status")
    err = excinfo.value
    assert err.status_code == status
    assert err.reason == httpx.codes.get_reason_phrase(status)
    assert str(status) in str(err)
    await client.close()
