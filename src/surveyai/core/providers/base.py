from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from surveyai.core.runtime.errors import (
    InvalidRequestOptionsError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
    ProviderTransportError,
    redact,
)

UNAVAILABLE_STATUSES = frozenset({429, 503})
DEFAULT_MAX_TOKENS = 500
PROBE_PROMPT = "test"
MAX_ERROR_BODY_CHARS = 500


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(slots=True, frozen=True)
class Message:
    role: Role
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(slots=True, frozen=True)
class RequestOptions:
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    system_prompt: str | None = None
    model: str | None = None


@dataclass(slots=True, frozen=True)
class ProviderResult:
    text: str
    provider: str

    def as_dict(self) -> dict[str, str]:
        return {"response": self.text, "provider": self.provider}


@dataclass(slots=True, frozen=True)
class ProviderStatus:
    name: str
    available: bool

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "available": self.available}


class ProviderAdapter(ABC):
    name: str

    @abstractmethod
    async def probe(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def request(self, prompt: str, options: RequestOptions | None = None) -> str:
        raise NotImplementedError


def validate_options(options: RequestOptions, provider: str) -> None:
    if options.max_tokens is not None and options.max_tokens < 1:
        raise InvalidRequestOptionsError(provider, f"max_tokens must be >= 1, got {options.max_tokens}")
    if options.temperature is not None and not 0.0 <= options.temperature <= 2.0:
        raise InvalidRequestOptionsError(provider, f"temperature must be within [0, 2], got {options.temperature}")
    if options.top_p is not None and not 0.0 <= options.top_p <= 1.0:
        raise InvalidRequestOptionsError(provider, f"top_p must be within [0, 1], got {options.top_p}")


def build_chat_messages(prompt: str, options: RequestOptions) -> list[dict[str, str]]:
    messages: list[Message] = []
    if options.system_prompt:
        messages.append(Message(role=Role.SYSTEM, content=options.system_prompt))
    messages.append(Message(role=Role.USER, content=prompt))
    return [m.as_dict() for m in messages]


def first_choice_content(provider: str, body: Any) -> str:
    """Extract ``choices[0].message.content`` from an OpenAI-style chat completion."""
    try:
        message = body["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderResponseError(provider, "malformed completion payload: missing choices[0].message") from exc
    if not isinstance(message, dict):
        raise ProviderResponseError(provider, "malformed completion payload: message is not an object")
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise ProviderResponseError(provider, "malformed completion payload: content is not text")
    return content


class HttpProviderAdapter(ProviderAdapter):
    """Shared plumbing for adapters that talk JSON over HTTPS."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        probe_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.probe_timeout_seconds = probe_timeout_seconds
        self._transport = transport

    def _secrets(self) -> tuple[str, ...]:
        return ()

    def _redact(self, text: str) -> str:
        return redact(text, self._secrets())

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> httpx.Response:
        all_headers = {"Content-Type": "application/json", **(headers or {})}
        try:
            async with httpx.AsyncClient(
                timeout=timeout or self.timeout_seconds,
                transport=self._transport,
            ) as client:
                return await client.post(url, json=payload, headers=all_headers)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(self.name, self._redact(f"request timed out: {exc!s}")) from None
        except httpx.HTTPError as exc:
            raise ProviderTransportError(
                self.name, self._redact(f"transport error {exc.__class__.__name__}: {exc!s}")
            ) from None

    def _check_response(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = self._redact((response.text or "")[:MAX_ERROR_BODY_CHARS])
        raise ProviderHTTPError(self.name, response.status_code, body)

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            raise ProviderResponseError(self.name, "response body is not valid JSON") from None

    async def _probe(self, url: str, payload: dict[str, Any], headers: dict[str, str] | None = None) -> bool:
        try:
            response = await self._post(url, payload, headers, timeout=self.probe_timeout_seconds)
        except (ProviderTransportError, ProviderTimeoutError):
            return False
        return response.status_code not in UNAVAILABLE_STATUSES
