"""Shared fixtures: settings factory, recording mock transport, fake sleep."""

import json
from typing import Callable, List

import httpx
import pytest

from bulkstatus.config import Settings

BASE_URL = "https://api.example.com"


def make_settings(**overrides) -> Settings:
    values = {
        "api_base_url": BASE_URL,
        "resource_endpoint": "/resources",
        "status_fields": ["status", "resourceStatus", "accountStatus", "state", "accessLevel"],
        "target_status": "ACTIVE",
        "auth_token": "secret-token",
        "min_delay": 100,
        "max_delay": 200,
        "max_retries": 2,
        "ui_language": "en",
    }
    values.update(overrides)
    return Settings(**values)


class RecordingTransport(httpx.AsyncBaseTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._inner = httpx.MockTransport(self._record(handler))

    def _record(self, handler):
        def wrapped(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        return wrapped

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._inner.handle_async_request(request)

    @property
    def updates(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method != "GET"]

    @property
    def queries(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)


class FakeSleep:
    """Records requested sleep durations instead of waiting."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def fake_sleep() -> FakeSleep:
    return FakeSleep()
