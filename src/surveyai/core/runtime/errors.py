from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

GENERIC_UNAVAILABLE_MESSAGE = "AI service is temporarily unavailable. Please try again later."


class AIServiceError(Exception):
    """Base class for every error raised by the AI failover client."""


class ProviderError(AIServiceError):
    """A single backend failed. Carries full diagnostic context for server-side logs."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.detail = message


class ProviderHTTPError(ProviderError):
    def __init__(self, provider: str, status_code: int, body: str = "") -> None:
        super().__init__(provider, f"API error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class ProviderTransportError(ProviderError):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class ProviderResponseError(ProviderError):
    pass


class EmptyCompletionError(ProviderError):
    def __init__(self, provider: str) -> None:
        super().__init__(provider, "empty completion")


class InvalidRequestOptionsError(ProviderError):
    pass


class AIServiceUnavailableError(AIServiceError):
    """The only error the failover client lets reach its callers."""

    def __init__(self) -> None:
        super().__init__(GENERIC_UNAVAILABLE_MESSAGE)


class NoProvidersConfiguredError(AIServiceUnavailableError):
    pass


@dataclass(slots=True, frozen=True)
class FailureRecord:
    provider: str
    outcome: str
    error_type: str | None = None
    detail: str | None = None
    http_status: int | None = None

    def as_log_dict(self) -> dict:
        out: dict = {"provider": self.provider, "outcome": self.outcome}
        if self.error_type:
            out["error_type"] = self.error_type
        if self.detail:
            out["detail"] = self.detail
        if self.http_status is not None:
            out["http_status"] = self.http_status
        return out


def failure_from_exception(provider: str, exc: BaseException, *, outcome: str = "error") -> FailureRecord:
    return FailureRecord(
        provider=provider,
        outcome=outcome,
        error_type=exc.__class__.__name__,
        detail=compact_error_summary(exc),
        http_status=getattr(exc, "status_code", None),
    )


def redact(text: str, secrets: Iterable[str | None]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text


def _compact_message(message: str, max_len: int = 220) -> str:
    msg = re.sub(r"\s+", " ", message)
    return msg.strip()[:max_len]


def compact_error_summary(exc: BaseException, max_len: int = 220) -> str:
    return f"{exc.__class__.__name__}: {_compact_message(str(exc), max_len=max_len)}"
