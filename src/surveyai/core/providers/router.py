from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence

import structlog

from surveyai.core.providers.base import ProviderAdapter, ProviderResult, ProviderStatus, RequestOptions
from surveyai.core.runtime.errors import (
    AIServiceUnavailableError,
    EmptyCompletionError,
    FailureRecord,
    NoProvidersConfiguredError,
    ProviderTimeoutError,
    compact_error_summary,
    failure_from_exception,
)
from surveyai.core.runtime.timeouts import run_with_timeout
from surveyai.core.telemetry.logging import get_logger


class FailoverRouter:
    """Tries providers strictly in order: probe, then request, first non-empty text wins.

    The provider sequence is fixed at construction. Calls share no mutable
    state, so one router can serve concurrent requests.
    """

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        *,
        request_timeout_seconds: float = 30.0,
        probe_timeout_seconds: float = 10.0,
        logger=None,
    ) -> None:
        names = [p.name for p in providers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate provider names: {duplicates}")
        self._providers: tuple[ProviderAdapter, ...] = tuple(providers)
        self.request_timeout_seconds = request_timeout_seconds
        self.probe_timeout_seconds = probe_timeout_seconds
        self.logger = logger or get_logger("surveyai.providers.router")

    def configured(self) -> list[str]:
        return [p.name for p in self._providers]

    async def _is_available(self, provider: ProviderAdapter) -> bool:
        try:
            return bool(await run_with_timeout(
                provider.probe(), self.probe_timeout_seconds, provider=provider.name, stage="probe"
            ))
        except ProviderTimeoutError:
            self.logger.warning("provider_probe_timeout", provider=provider.name, timeout_s=self.probe_timeout_seconds)
            return False
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("provider_probe_error", provider=provider.name, error=compact_error_summary(exc))
            return False

    async def _attempt(self, provider: ProviderAdapter, prompt: str, options: RequestOptions) -> str:
        return await run_with_timeout(
            provider.request(prompt, options), self.request_timeout_seconds, provider=provider.name
        )

    async def generate_response(self, prompt: str, options: RequestOptions | None = None) -> ProviderResult:
        options = options or RequestOptions()
        with structlog.contextvars.bound_contextvars(request_id=uuid.uuid4().hex[:12]):
            if not self._providers:
                self.logger.error("no_providers_configured")
                raise NoProvidersConfiguredError()

            failures: list[FailureRecord] = []
            for position, provider in enumerate(self._providers, start=1):
                self.logger.info("provider_attempt", provider=provider.name, position=position)

                if not await self._is_available(provider):
                    self.logger.info("provider_unavailable", provider=provider.name)
                    failures.append(FailureRecord(provider=provider.name, outcome="unavailable"))
                    continue

                try:
                    text = await self._attempt(provider, prompt, options)
                except ProviderTimeoutError as exc:
                    failures.append(failure_from_exception(provider.name, exc, outcome="timeout"))
                    self.logger.warning("provider_failed", **failures[-1].as_log_dict())
                    continue
                except Exception as exc:  # noqa: BLE001
                    failures.append(failure_from_exception(provider.name, exc))
                    self.logger.warning("provider_failed", **failures[-1].as_log_dict())
                    continue

                if not text or not text.strip():
                    failures.append(
                        failure_from_exception(provider.name, EmptyCompletionError(provider.name), outcome="empty")
                    )
                    self.logger.warning("provider_empty_completion", provider=provider.name)
                    continue

                self.logger.info("provider_succeeded", provider=provider.name, skipped=len(failures))
                return ProviderResult(text=text, provider=provider.name)

            self.logger.error(
                "all_providers_failed",
                attempted=len(failures),
                failures=[f.as_log_dict() for f in failures],
            )
            raise AIServiceUnavailableError()

    async def get_provider_status(self) -> list[ProviderStatus]:
        results = await asyncio.gather(*(self._is_available(p) for p in self._providers))
        return [ProviderStatus(name=p.name, available=ok) for p, ok in zip(self._providers, results)]
