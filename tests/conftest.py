"""Shared fixtures: settings and an in-memory stand-in for the Dropi API."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings
from core.services.dispatcher import OperationDispatcher, create_dispatcher

TOKEN = "tok-123"
PUBLIC_IP = "203.0.113.7"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeDropi:
    """Routes requests by (method, path) and records every one of them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Responder] = {}
        self.on("POST", "/api/login", json={
            "isSuccess": True,
            "token": TOKEN,
            "wallets": [{"amount": 150000.5, "currency": "COP"}],
            "user": {"name": "Ops"},
        })

    def on(self, method: str, path: str, *, status: int = 200, json: Any = None, text: str | None = None) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json if json is not None else {"isSuccess": True})

        self._routes[(method, path)] = responder

    def on_call(self, method: str, path: str, responder: Responder) -> None:
        self._routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(200, json={"isSuccess": True, "objects": []})
        return responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @property
    def logins(self) -> list[httpx.Request]:
        return self.requests_to("/api/login")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


class CountingResolver:
    def __init__(self, ip: str = PUBLIC_IP) -> None:
        self.ip = ip
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        return self.ip


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "email": "ops@example.com",
        "password": "s3cret-pass",
        "country": "co",
        "api_url": None,
        "white_brand_id": "1",
        "browser_headers": True,
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def fake() -> FakeDropi:
    return FakeDropi()


@pytest.fixture
def resolver() -> CountingResolver:
    return CountingResolver()


@pytest.fixture
def dispatcher(settings: AppSettings, fake: FakeDropi, resolver: CountingResolver) -> OperationDispatcher:
    return create_dispatcher(settings, transport=fake.transport, ip_resolver=resolver)
