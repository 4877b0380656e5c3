"""Shared fixtures: an in-process app wired to a fake OpenWeatherMap."""

import json
from typing import Callable, Dict, List

import httpx
import pytest
import pytest_asyncio

from weather_proxy.config import Settings
from weather_proxy.main import create_app

API_KEY = "test-key"


class BrokenStream(httpx.AsyncByteStream):
    """Body stream that fails mid-read."""

    async def __aiter__(self):
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


class FakeProvider:
    """Stands in for OpenWeatherMap, recording every request it receives."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handlers: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(self, path: str, status_code: int = 200, content=None, json_body=None):
        """Serve a fixed response for an upstream path."""
        if json_body is not None:
            content = json.dumps(json_body).encode()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, content=content or b"")

        self.handlers[path] = handler

    def fail(self, path: str, exc: Exception):
        """Raise a transport error for an upstream path."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        self.handlers[path] = handler

    def break_body(self, path: str):
        """Answer 200 with a body that cannot be read."""
        self.handlers[path] = lambda request: httpx.Response(200, stream=BrokenStream())

    def on(self, path: str, handler: Callable[[httpx.Request], httpx.Response]):
        self.handlers[path] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(request.url.path)
        if handler is None:
            return httpx.Response(404, content=b'{"cod":"404","message":"not stubbed"}')
        return handler(request)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=API_KEY)


@pytest.fixture
def app(settings, provider):
    return create_app(settings, transport=httpx.MockTransport(provider))


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
