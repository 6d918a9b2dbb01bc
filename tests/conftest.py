from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from remote_studio.remote_client import RemoteClient

BASE_URL = "http://remote.test"


class FakeHost:
    """In-memory stand-in for the remote workspace host."""

    def __init__(self) -> None:
        self.names: list[str] = []
        self.files: dict[str, str] = {}
        self.codes_response: dict[str, Any] | None = None
        self.prompt_response: dict[str, Any] = {"status": "done"}
        self.failing: dict[str, int] = {}
        self.unreachable = False
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def requests_to(self, endpoint: str) -> list[dict[str, Any]]:
        return [body for path, body in self.requests if path == endpoint]

    def handler(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path
        body = json.loads(request.content or b"{}")
        self.requests.append((endpoint, body))

        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if endpoint in self.failing:
            return httpx.Response(self.failing[endpoint], json={"error": "boom"})

        if endpoint == "/pedir-nomes":
            return httpx.Response(200, json={"names": self.names})
        if endpoint == "/pedir-codigos":
            if self.codes_response is not None:
                return httpx.Response(200, json=self.codes_response)
            return httpx.Response(200, json={"codes": [self.files.get(n) for n in body["names"]]})
        if endpoint == "/send-prompt":
            return httpx.Response(200, json=self.prompt_response)
        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def remote(host: FakeHost) -> RemoteClient:
    return RemoteClient(BASE_URL, transport=httpx.MockTransport(host.handler))
