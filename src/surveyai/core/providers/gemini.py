from __future__ import annotations

from typing import Any

import httpx

from surveyai.core.providers.base import (
    DEFAULT_MAX_TOKENS,
    PROBE_PROMPT,
    HttpProviderAdapter,
    RequestOptions,
    validate_options,
)
from surveyai.core.runtime.errors import ProviderResponseError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_DEFAULT_MODEL = "gemini-1.5-flash-latest"
GEMINI_DEFAULT_TEMPERATURE = 0.7
GEMINI_DEFAULT_TOP_P = 0.95
GEMINI_TOP_K = 64


def _resolve_gemini_model(requested: str | None, configured: str) -> str:
    if requested and requested.strip().lower().startswith("gemini-"):
        return requested.strip()
    return configured


def compose_prompt(prompt: str, system_prompt: str | None) -> str:
    if system_prompt:
        return f"{system_prompt}\n\nUser: {prompt}"
    return prompt


class GeminiAdapter(HttpProviderAdapter):
    name = "gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model: str = GEMINI_DEFAULT_MODEL,
        timeout_seconds: float = 30.0,
        probe_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            timeout_seconds=timeout_seconds,
            probe_timeout_seconds=probe_timeout_seconds,
            transport=transport,
        )
        self.api_key = api_key
        self.model = model

    def _url(self, model: str) -> str:
        return f"{GEMINI_BASE_URL}/{model}:generateContent?key={self.api_key}"

    def _secrets(self) -> tuple[str, ...]:
        return (self.api_key,)

    def _extract_text(self, body: Any) -> str:
        try:
            text = body["candidates"][0]["content"]["parts"][0].get("text")
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise ProviderResponseError(
                self.name, "malformed completion payload: missing candidates[0].content.parts[0]"
            ) from exc
        if text is None:
            return ""
        if not isinstance(text, str):
            raise ProviderResponseError(self.name, "malformed completion payload: text is not a string")
        return text

    async def request(self, prompt: str, options: RequestOptions | None = None) -> str:
        options = options or RequestOptions()
        validate_options(options, self.name)
        model = _resolve_gemini_model(options.model, self.model)
        payload = {
            "contents": [{"parts": [{"text": compose_prompt(prompt, options.system_prompt)}]}],
            "generationConfig": {
                "temperature": GEMINI_DEFAULT_TEMPERATURE if options.temperature is None else options.temperature,
                "maxOutputTokens": options.max_tokens or DEFAULT_MAX_TOKENS,
                "topP": GEMINI_DEFAULT_TOP_P if options.top_p is None else options.top_p,
                "topK": GEMINI_TOP_K,
            },
        }
        response = await self._post(self._url(model), payload)
        self._check_response(response)
        return self._extract_text(self._json(response))

    async def probe(self) -> bool:
        payload = {
            "contents": [{"parts": [{"text": PROBE_PROMPT}]}],
            "generationConfig": {"maxOutputTokens": 1},
        }
        return await self._probe(self._url(self.model), payload)
