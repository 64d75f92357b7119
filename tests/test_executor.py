from datetime import datetime, timezone

import httpx
import pytest

from bulkstatus.connectors.resource.client import ResourceClient
from bulkstatus.updater.executor import UpdateExecutor, build_update_payload

from conftest import FakeSleep, RecordingTransport, make_settings, request_json


def _executor(handler, sleep: FakeSleep, **overrides):
    settings = make_settings(**overrides)
    transport = RecordingTransport(handler)
    client = ResourceClient(settings, transport=transport)
    return UpdateExecutor(client, settings, sleep=sleep), transport


def test_build_update_payload_drops_other_fields() -> None:
    record = {
        "id": "r1",
        "state": "PENDING",
        "name": "dropped",
        "metadata": {"owner": "ops"},
    }
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    payload = build_update_payload(record, "state", "ACTIVE", now)

    assert payload == {
        "id": "r1",
        "state": "ACTIVE",
        "updatedAt": "2024-05-01T12:00:00+00:00",
        "metadata": {"owner": "ops"},
    }
    assert record["state"] == "PENDING"


@pytest.mark.parametrize("metadata", [None, {}])
def test_build_update_payload_defaults_metadata(metadata) -> None:
    record = {"id": 1, "metadata": metadata}
    assert build_update_payload(record, "status", "ACTIVE")["metadata"] == {}


@pytest.mark.asyncio
async def test_apply_sends_patch_to_resource_url(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(lambda request: httpx.Response(200, json={"ok": True}), fake_sleep)

    ok = await executor.apply({"id": 42, "accountStatus": "BLOCKED", "email": "a@b.c"})

    assert ok is True
    (request,) = transport.requests
    assert request.method == "PATCH"
    assert str(request.url) == "https://api.example.com/resources/42"
    body = request_json(request)
    assert body["id"] == 42
    assert body["accountStatus"] == "ACTIVE"
    assert "email" not in body
    assert "updatedAt" in body
    assert fake_sleep.calls == []


@pytest.mark.asyncio
async def test_apply_introduces_default_field(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(lambda request: httpx.Response(204), fake_sleep)

    assert await executor.apply({"id": 1, "name": "n"}) is True
    assert request_json(transport.requests[0])["status"] == "ACTIVE"


@pytest.mark.asyncio
async def test_apply_honours_method_and_update_endpoint(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(
        lambda request: httpx.Response(200),
        fake_sleep,
        update_method="put",
        update_endpoint="/admin/resources",
    )

    await executor.apply({"id": "abc"})

    request = transport.requests[0]
    assert request.method == "PUT"
    assert request.url.path == "/admin/resources/abc"


@pytest.mark.asyncio
async def test_apply_retries_with_linear_backoff_then_fails(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(lambda request: httpx.Response(500), fake_sleep, max_retries=2)

    ok = await executor.apply({"id": 1, "status": "PENDING"})

    assert ok is False
    assert len(transport.requests) == 3
    assert fake_sleep.calls == [1.0, 2.0]


@pytest.mark.asyncio
async def test_apply_recovers_after_transient_failure(fake_sleep: FakeSleep) -> None:
    responses = iter([httpx.Response(502), httpx.Response(200)])
    executor, transport = _executor(lambda request: next(responses), fake_sleep)

    assert await executor.apply({"id": 1}) is True
    assert len(transport.requests) == 2
    assert fake_sleep.calls == [1.0]


@pytest.mark.asyncio
async def test_apply_retries_transport_errors(fake_sleep: FakeSleep) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    executor, transport = _executor(handler, fake_sleep, max_retries=1)

    assert await executor.apply({"id": 1}) is False
    assert len(transport.requests) == 2
    assert fake_sleep.calls == [1.0]


@pytest.mark.asyncio
async def test_apply_with_zero_retries_makes_one_attempt(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(lambda request: httpx.Response(400), fake_sleep, max_retries=0)

    assert await executor.apply({"id": 1}) is False
    assert len(transport.requests) == 1
    assert fake_sleep.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [httpx.Response(200, text="OK"), httpx.Response(202, text="<p>accepted</p>")])
async def test_apply_ignores_non_json_success_body(fake_sleep: FakeSleep, response: httpx.Response) -> None:
    executor, transport = _executor(lambda request: response, fake_sleep)

    assert await executor.apply({"id": 1, "status": "PENDING"}) is True
    assert len(transport.requests) == 1
    assert fake_sleep.calls == []


@pytest.mark.asyncio
async def test_apply_treats_invalid_url_as_retryable_failure(fake_sleep: FakeSleep) -> None:
    executor, transport = _executor(lambda request: httpx.Response(200), fake_sleep, max_retries=1)

    assert await executor.apply({"id": "bad\nid"}) is False
    assert transport.requests == []
    assert fake_sleep.calls == [1.0]
