from __future__ import annotations

import json

import httpx
import pytest

from surveyai.core.providers.base import RequestOptions
from surveyai.core.providers.gemini import GeminiAdapter, compose_prompt
from surveyai.core.runtime.errors import ProviderHTTPError, ProviderResponseError


def _candidate(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def _adapter(handler) -> GeminiAdapter:
    return GeminiAdapter(api_key="gem-secret", model="gemini-1.5-flash-latest", transport=httpx.MockTransport(handler))


def test_compose_prompt():
    assert compose_prompt("hi", None) == "hi"
    assert compose_prompt("hi", "You are helpful") == "You are helpful\n\nUser: hi"


@pytest.mark.asyncio
async def test_request_wire_format():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _candidate("Hello")

    text = await _adapter(handler).request("hi", RequestOptions(system_prompt="Be short", max_tokens=50))

    assert text == "Hello"
    req = seen[0]
    assert req.url.host == "generativelanguage.googleapis.com"
    assert req.url.path == "/v1beta/models/gemini-1.5-flash-latest:generateContent"
    assert req.url.params["key"] == "gem-secret"
    assert json.loads(req.content) == {
        "contents": [{"parts": [{"text": "Be short\n\nUser: hi"}]}],
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 50, "topP": 0.95, "topK": 64},
    }


@pytest.mark.asyncio
async def test_foreign_model_override_is_ignored():
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return _candidate("x")

    adapter = _adapter(handler)
    await adapter.request("hi", RequestOptions(model="gpt-4o"))
    await adapter.request("hi", RequestOptions(model="gemini-1.5-pro"))

    assert paths == [
        "/v1beta/models/gemini-1.5-flash-latest:generateContent",
        "/v1beta/models/gemini-1.5-pro:generateContent",
    ]


@pytest.mark.asyncio
async def test_error_detail_never_contains_key():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text=f"failure at {request.url}")

    with pytest.raises(ProviderHTTPError) as excinfo:
        await _adapter(handler).request("hi")

    assert excinfo.value.status_code == 500
    assert "gem-secret" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_missing_candidates_is_malformed():
    with pytest.raises(ProviderResponseError):
        await _adapter(lambda request: httpx.Response(200, json={"candidates": []})).request("hi")


@pytest.mark.asyncio
async def test_probe_payload_and_rate_limit():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(429, json={"error": {"status": "RESOURCE_EXHAUSTED"}})

    assert await _adapter(handler).probe() is False
    assert bodies[0] == {"contents": [{"parts": [{"text": "test"}]}], "generationConfig": {"maxOutputTokens": 1}}
