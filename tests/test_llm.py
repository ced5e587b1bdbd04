from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from glowup.config import PLACEHOLDER_API_KEY, Settings
from glowup.errors import MissingCredential, Unauthorized, UnparsableResponse, Unreachable
from glowup.llm import invoke

SETTINGS = Settings(api_base_url="https://anthropic.test", model="claude-test")


class RecordingTransport:
    """Count requests and answer them with *handler*."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _text_response(text: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


@pytest.mark.asyncio
@pytest.mark.parametrize("credential", [None, "", "  ", PLACEHOLDER_API_KEY])
async def test_missing_credential_is_rejected_before_any_request(credential: str | None) -> None:
    transport = RecordingTransport(_text_response("[]"))

    async with transport.client() as client:
        with pytest.raises(MissingCredential):
            await invoke("system", "user", credential, 100, settings=SETTINGS, http_client=client)

    assert transport.requests == []


@pytest.mark.asyncio
async def test_request_shape_and_verbatim_text() -> None:
    transport = RecordingTransport(_text_response("  [1, 2]\n"))

    async with transport.client() as client:
        text = await invoke(
            "be precise", "list numbers", " sk-ant-api03-key ", 321, settings=SETTINGS, http_client=client
        )

    assert text == "  [1, 2]\n"
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://anthropic.test/v1/messages"
    assert request.headers["x-api-key"] == "sk-ant-api03-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(request.content)
    assert body["model"] == "claude-test"
    assert body["max_tokens"] == 321
    assert body["system"] == "be precise"
    assert body["messages"] == [{"role": "user", "content": "list numbers"}]


@pytest.mark.asyncio
async def test_status_401_is_unauthorized() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(401, text="nope"))

    async with transport.client() as client:
        with pytest.raises(Unauthorized):
            await invoke("s", "u", "sk-ant-api03-bad", 10, settings=SETTINGS, http_client=client)

    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_authentication_error_marker_is_unauthorized() -> None:
    body = {"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}}
    transport = RecordingTransport(lambda request: httpx.Response(403, json=body))

    async with transport.client() as client:
        with pytest.raises(Unauthorized):
            await invoke("s", "u", "sk-ant-api03-bad", 10, settings=SETTINGS, http_client=client)


@pytest.mark.asyncio
async def test_other_failures_are_unreachable_with_status_and_body() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(529, text="overloaded_error"))

    async with transport.client() as client:
        with pytest.raises(Unreachable) as excinfo:
            await invoke("s", "u", "sk-ant-api03-key", 10, settings=SETTINGS, http_client=client)

    assert excinfo.value.status_code == 529
    assert excinfo.value.body == "overloaded_error"
    assert "529" in excinfo.value.message
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_transport_failure_is_unreachable_without_status() -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    transport = RecordingTransport(fail)

    async with transport.client() as client:
        with pytest.raises(Unreachable) as excinfo:
            await invoke("s", "u", "sk-ant-api03-key", 10, settings=SETTINGS, http_client=client)

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"content": []},
        {"content": [{"type": "tool_use", "id": "x", "name": "lookup", "input": {}}]},
        {"content": [{"type": "tool_use", "id": "x", "name": "lookup", "input": {}}, {"type": "text", "text": "[]"}]},
    ],
)
async def test_response_not_starting_with_text_block_is_unparsable(payload: dict) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=payload))

    async with transport.client() as client:
        with pytest.raises(UnparsableResponse):
            await invoke("s", "u", "sk-ant-api03-key", 10, settings=SETTINGS, http_client=client)


@pytest.mark.asyncio
async def test_non_json_body_is_unparsable() -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, text="<html>"))

    async with transport.client() as client:
        with pytest.raises(UnparsableResponse):
            await invoke("s", "u", "sk-ant-api03-key", 10, settings=SETTINGS, http_client=client)


@pytest.mark.asyncio
async def test_injected_http_client_is_left_open() -> None:
    transport = RecordingTransport(_text_response("[]"))

    async with transport.client() as client:
        await invoke("s", "u", "sk-ant-api03-key", 10, settings=SETTINGS, http_client=client)

        assert not client.is_closed
