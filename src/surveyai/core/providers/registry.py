from __future__ import annotations

from collections.abc import Mapping, Sequence

import httpx

from surveyai.core.config.schema import AppConfig, AzureOpenAIConfig
from surveyai.core.providers.azure_openai import AzureOpenAIAdapter
from surveyai.core.providers.base import ProviderAdapter
from surveyai.core.providers.deepseek import DeepSeekAdapter
from surveyai.core.providers.gemini import GeminiAdapter
from surveyai.core.providers.router import FailoverRouter
from surveyai.core.telemetry.logging import get_logger

AZURE_PRIMARY = "azure_openai_primary"
AZURE_SECONDARY = "azure_openai_secondary"
GEMINI = "gemini"
DEEPSEEK = "deepseek"

DEFAULT_PROVIDER_ORDER: tuple[str, ...] = (AZURE_PRIMARY, AZURE_SECONDARY, GEMINI, DEEPSEEK)

logger = get_logger("surveyai.providers.registry")


def _azure(name: str, slot: AzureOpenAIConfig, cfg: AppConfig, transport) -> AzureOpenAIAdapter:
    return AzureOpenAIAdapter(
        name,
        endpoint=slot.endpoint,
        api_key=slot.api_key,
        deployment=slot.deployment,
        api_version=slot.api_version,
        default_model=slot.model,
        default_temperature=cfg.generation.temperature,
        default_top_p=cfg.generation.top_p,
        timeout_seconds=cfg.runtime.request_timeout_seconds,
        probe_timeout_seconds=cfg.runtime.probe_timeout_seconds,
        transport=transport,
    )


def build_providers(
    cfg: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, ProviderAdapter]:
    """Instantiate an adapter for every slot whose configuration is present."""
    providers: dict[str, ProviderAdapter] = {}
    slots = cfg.providers
    timeouts = {
        "timeout_seconds": cfg.runtime.request_timeout_seconds,
        "probe_timeout_seconds": cfg.runtime.probe_timeout_seconds,
        "transport": transport,
    }

    if slots.azure_openai_primary is not None:
        providers[AZURE_PRIMARY] = _azure(AZURE_PRIMARY, slots.azure_openai_primary, cfg, transport)
    if slots.azure_openai_secondary is not None:
        providers[AZURE_SECONDARY] = _azure(AZURE_SECONDARY, slots.azure_openai_secondary, cfg, transport)
    if slots.gemini is not None:
        providers[GEMINI] = GeminiAdapter(api_key=slots.gemini.api_key, model=slots.gemini.model, **timeouts)
    if slots.deepseek is not None:
        providers[DEEPSEEK] = DeepSeekAdapter(api_key=slots.deepseek.api_key, model=slots.deepseek.model, **timeouts)
    return providers


def resolve_provider_order(
    providers: Mapping[str, ProviderAdapter],
    declared_order: Sequence[str] | None = None,
) -> list[ProviderAdapter]:
    order = list(declared_order or DEFAULT_PROVIDER_ORDER)
    resolved: list[ProviderAdapter] = []
    seen: set[str] = set()
    for name in order:
        if name in seen:
            continue
        adapter = providers.get(name)
        if adapter is None:
            logger.debug("provider_order_dropped", provider=name)
            continue
        seen.add(name)
        resolved.append(adapter)
    return resolved


def build_router(cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> FailoverRouter:
    ordered = resolve_provider_order(build_providers(cfg, transport=transport), cfg.providers.order)
    router = FailoverRouter(
        ordered,
        request_timeout_seconds=cfg.runtime.request_timeout_seconds,
        probe_timeout_seconds=cfg.runtime.probe_timeout_seconds,
    )
    logger.info("providers_initialized", count=len(ordered), order=router.configured())
    return router
