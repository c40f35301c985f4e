#!/usr/bin/env python3
"""Tests for the relay client."""
import json

import httpx
import pytest

from echosync.errors import NetworkError
from echosync.remote import RemoteClipboard

PUSH_URL = "https://relay.test/api/trpc/clipboard.addItem?batch=1"
PULL_URL = "https://relay.test/api/trpc/clipboard.getLastCopiedItem?batch=1"


def make_remote(handler) -> RemoteClipboard:
    """Create a RemoteClipboard whose requests are answered by handler."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteClipboard(PUSH_URL, PULL_URL, client=client)


@pytest.mark.asyncio
async def test_push_posts_batch_envelope() -> None:
    """Test push sends the item tagged as mobile to the push endpoint."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"result": {}}])

    remote = make_remote(handler)
    await remote.push("hello")

    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/trpc/clipboard.addItem"
    assert seen[0].url.params["batch"] == "1"
    assert json.loads(seen[0].content) == {
        "0": {"json": {"item": "hello", "device": "mobile"}}
    }


@pytest.mark.asyncio
async def test_push_non_2xx_raises_network_error() -> None:
    """Test push raises NetworkError when the relay rejects the request."""
    remote = make_remote(lambda request: httpx.Response(500))
    with pytest.raises(NetworkError, match="500"):
        await remote.push("hello")


@pytest.mark.asyncio
async def test_push_transport_error_raises_network_error() -> None:
    """Test push raises NetworkError when the relay is unreachable."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    remote = make_remote(handler)
    with pytest.raises(NetworkError, match="connection refused"):
        await remote.push("hello")


@pytest.mark.asyncio
async def test_pull_sends_desktop_input_and_returns_item() -> None:
    """Test pull queries the desktop value and extracts the item."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json=[{"result": {"data": {"json": {"item": "desk"}}}}]
        )

    remote = make_remote(handler)
    assert await remote.pull() == "desk"

    request = seen[0]
    assert request.method == "GET"
    assert request.url.params["batch"] == "1"
    assert json.loads(request.url.params["input"]) == {
        "0": {"json": {"device": "desktop"}}
    }


@pytest.mark.asyncio
async def test_pull_empty_relay_returns_none() -> None:
    """Test pull returns None when the relay holds no value."""
    remote = make_remote(
        lambda request: httpx.Response(
            200, json=[{"result": {"data": {"json": None}}}]
        )
    )
    assert await remote.pull() is None


@pytest.mark.asyncio
async def test_pull_malformed_json_returns_none() -> None:
    """Test a non-JSON body is tolerated as no data."""
    remote = make_remote(lambda request: httpx.Response(200, text="<html>"))
    assert await remote.pull() is None


@pytest.mark.asyncio
async def test_pull_non_2xx_raises_network_error() -> None:
    """Test pull raises NetworkError on an error status."""
    remote = make_remote(lambda request: httpx.Response(503))
    with pytest.raises(NetworkError, match="503"):
        await remote.pull()


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    """Test a caller-provided client is not closed by the remote."""
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    async with RemoteClipboard(PUSH_URL, PULL_URL, client=client):
        pass
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_client() -> None:
    """Test the remote closes the client it created."""
    remote = RemoteClipboard(PUSH_URL, PULL_URL)
    await remote.aclose()
    assert remote._client.is_closed
