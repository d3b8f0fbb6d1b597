"""Pytest configuration and shared fixtures for the proxy."""

from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from llmrelay.infrastructure.adapters.openrouter_adapter import OpenRouterAdapter
from llmrelay.infrastructure.config.settings import RelaySettings
from llmrelay_proxy.dependencies import get_settings, get_upstream_adapter
from llmrelay_proxy.main import app

TEST_API_KEY = "sk-or-test-key-0123456789"


class StubUpstream:
    """Upstream stand-in for httpx.MockTransport that records every call."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or httpx.Response(200, json={"choices": []})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def make_client() -> Iterator[Callable[..., TestClient]]:
    """Build a TestClient wired to a stubbed upstream and a chosen credential."""

    def _make(handler, api_key: str | None = TEST_API_KEY) -> TestClient:
        settings = RelaySettings(openrouter_api_key=api_key, _env_file=None)
        adapter = OpenRouterAdapter(transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_upstream_adapter] = lambda: adapter
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build bare Starlette requests for calling RelayHandler directly."""

    def _make(method: str = "POST", body: bytes = b"") -> Request:
        async def receive() -> dict:
            return {"type": "http.request", "body": body, "more_body": False}

        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": "/",
            "raw_path": b"/",
            "root_path": "",
            "query_string": b"",
            "headers": [(b"content-type", b"application/json")],
            "client": ("testclient", 50000),
            "server": ("testserver", 80),
        }
        return Request(scope, receive)

    return _make
