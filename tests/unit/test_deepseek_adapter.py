from __future__ import annotations

import json

import httpx
import pytest

from surveyai.core.providers.base import RequestOptions
from surveyai.core.providers.deepseek import DEEPSEEK_URL, DeepSeekAdapter
from surveyai.core.runtime.errors import ProviderHTTPError, ProviderResponseError


def _adapter(handler) -> DeepSeekAdapter:
    return DeepSeekAdapter(api_key="ds-secret", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_request_wire_format():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "answer"}}]})

    text = await _adapter(handler).request("q", RequestOptions(system_prompt="sys", temperature=1.1, model="gpt-4o"))

    assert text == "answer"
    req = seen[0]
    assert str(req.url) == DEEPSEEK_URL
    assert req.headers["authorization"] == "Bearer ds-secret"
    assert json.loads(req.content) == {
        "model": "deepseek-chat",
        "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "q"}],
        "max_tokens": 500,
        "temperature": 1.1,
    }


@pytest.mark.asyncio
async def test_deepseek_model_override_is_honoured():
    models: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        models.append(json.loads(request.content)["model"])
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    await _adapter(handler).request("q", RequestOptions(model="deepseek-reasoner"))
    assert models == ["deepseek-reasoner"]


@pytest.mark.asyncio
async def test_http_error_and_non_json_body():
    with pytest.raises(ProviderHTTPError) as excinfo:
        await _adapter(lambda request: httpx.Response(402, text="Insufficient Balance")).request("q")
    assert excinfo.value.status_code == 402
    assert "Insufficient Balance" in excinfo.value.body

    with pytest.raises(ProviderResponseError):
        await _adapter(lambda request: httpx.Response(200, text="<html>gateway</html>")).request("q")


@pytest.mark.asyncio
async def test_probe_treats_other_errors_as_available():
    assert await _adapter(lambda request: httpx.Response(401, json={})).probe() is True
    assert await _adapter(lambda request: httpx.Response(503, json={})).probe() is False
