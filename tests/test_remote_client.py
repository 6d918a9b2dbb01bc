from __future__ import annotations

import asyncio

import httpx
import pytest

from remote_studio.remote_client import RemoteClient, RemoteError


def _client(handler) -> RemoteClient:
    return RemoteClient("http://remote.test/", transport=httpx.MockTransport(handler))


def test_list_names_posts_empty_body(host, remote: RemoteClient) -> None:
    host.names = ["src/app.ts", "readme.md"]

    response = asyncio.run(remote.list_names())

    assert response.names == ["src/app.ts", "readme.md"]
    assert host.requests == [("/pedir-nomes", {})]


def test_requests_carry_json_and_tunnel_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"names": []})

    asyncio.run(_client(handler).list_names())

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://remote.test/pedir-nomes"
    assert request.headers["accept"] == "application/json"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["ngrok-skip-browser-warning"] == "69420"


def test_names_missing_or_malformed_is_none() -> None:
    client = _client(lambda request: httpx.Response(200, json={"names": [1, 2]}))

    assert asyncio.run(client.list_names()).names is None


def test_fetch_codes_returns_raw_object(host, remote: RemoteClient) -> None:
    host.codes_response = {"files": [{"name": "a.ts", "code": "A"}]}

    data = asyncio.run(remote.fetch_codes(["a.ts"]))

    assert data == {"files": [{"name": "a.ts", "code": "A"}]}
    assert host.requests_to("/pedir-codigos") == [{"names": ["a.ts"]}]


def test_send_prompt(host, remote: RemoteClient) -> None:
    response = asyncio.run(remote.send_prompt("add a delete button"))

    assert response.status == "done"
    assert host.requests_to("/send-prompt") == [{"prompt": "add a delete button"}]


def test_send_prompt_without_status(host, remote: RemoteClient) -> None:
    host.prompt_response = {"status": 7}

    assert asyncio.run(remote.send_prompt("x")).status is None


def test_error_status_raises_remote_error(host, remote: RemoteClient) -> None:
    host.failing["/pedir-nomes"] = 502

    with pytest.raises(RemoteError, match="Status 502"):
        asyncio.run(remote.list_names())


def test_transport_failure_raises_remote_error(host, remote: RemoteClient) -> None:
    host.unreachable = True

    with pytest.raises(RemoteError, match="Connection refused"):
        asyncio.run(remote.list_names())


def test_invalid_json_raises_remote_error() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>tunnel warning</html>"))

    with pytest.raises(RemoteError, match="Invalid JSON"):
        asyncio.run(client.list_names())


def test_non_object_json_raises_remote_error() -> None:
    client = _client(lambda request: httpx.Response(200, json=["a.ts"]))

    with pytest.raises(RemoteError, match="expected a JSON object"):
        asyncio.run(client.fetch_codes(["a.ts"]))


def test_async_context_manager_closes_client() -> None:
    async def scenario() -> RemoteClient:
        async with _client(lambda request: httpx.Response(200, json={})) as client:
            await client.list_names()
        return client

    client = asyncio.run(scenario())

    assert client.client.is_closed
