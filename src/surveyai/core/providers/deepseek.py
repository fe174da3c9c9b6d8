from __future__ import annotations

import httpx

from surveyai.core.providers.base import (
    DEFAULT_MAX_TOKENS,
    PROBE_PROMPT,
    HttpProviderAdapter,
    RequestOptions,
    build_chat_messages,
    first_choice_content,
    validate_options,
)

DEEPSEEK_URL = "https://api.deepseek.com/v1/chat/completions"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_TEMPERATURE = 0.7


class DeepSeekAdapter(HttpProviderAdapter):
    name = "deepseek"

    def __init__(
        self,
        *,
        api_key: str,
        model: str = DEEPSEEK_DEFAULT_MODEL,
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

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _secrets(self) -> tuple[str, ...]:
        return (self.api_key,)

    def _resolve_model(self, requested: str | None) -> str:
        # Callers often pass an Azure deployment model name; only honour DeepSeek ones.
        if requested and requested.strip().lower().startswith("deepseek-"):
            return requested.strip()
        return self.model

    async def request(self, prompt: str, options: RequestOptions | None = None) -> str:
        options = options or RequestOptions()
        validate_options(options, self.name)
        payload = {
            "model": self._resolve_model(options.model),
            "messages": build_chat_messages(prompt, options),
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": DEEPSEEK_DEFAULT_TEMPERATURE if options.temperature is None else options.temperature,
        }
        response = await self._post(DEEPSEEK_URL, payload, self._headers())
        self._check_response(response)
        return first_choice_content(self.name, self._json(response))

    async def probe(self) -> bool:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": PROBE_PROMPT}],
            "max_tokens": 1,
        }
        return await self._probe(DEEPSEEK_URL, payload, self._headers())
