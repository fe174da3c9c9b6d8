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


class AzureOpenAIAdapter(HttpProviderAdapter):
    """One Azure OpenAI chat-completions deployment.

    Two instances with different endpoint/key/deployment triples give
    primary/secondary redundancy against the same vendor.
    """

    def __init__(
        self,
        name: str,
        *,
        endpoint: str,
        api_key: str,
        deployment: str,
        api_version: str,
        default_model: str,
        default_temperature: float = 0.2,
        default_top_p: float = 0.9,
        timeout_seconds: float = 30.0,
        probe_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            timeout_seconds=timeout_seconds,
            probe_timeout_seconds=probe_timeout_seconds,
            transport=transport,
        )
        self.name = name
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.deployment = deployment
        self.api_version = api_version
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.default_top_p = default_top_p

    @property
    def url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions"
            f"?api-version={self.api_version}"
        )

    def _headers(self) -> dict[str, str]:
        return {"api-key": self.api_key}

    def _secrets(self) -> tuple[str, ...]:
        return (self.api_key,)

    async def request(self, prompt: str, options: RequestOptions | None = None) -> str:
        options = options or RequestOptions()
        validate_options(options, self.name)
        payload = {
            "messages": build_chat_messages(prompt, options),
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": self.default_temperature if options.temperature is None else options.temperature,
            "top_p": self.default_top_p if options.top_p is None else options.top_p,
            "frequency_penalty": 0,
            "presence_penalty": 0,
            "model": options.model or self.default_model,
        }
        response = await self._post(self.url, payload, self._headers())
        self._check_response(response)
        return first_choice_content(self.name, self._json(response))

    async def probe(self) -> bool:
        payload = {
            "messages": [{"role": "user", "content": PROBE_PROMPT}],
            "max_tokens": 1,
            "model": self.default_model,
        }
        return await self._probe(self.url, payload, self._headers())
