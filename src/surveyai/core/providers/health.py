from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel

from surveyai.core.config.schema import AppConfig
from surveyai.core.providers.router import FailoverRouter


class ProviderStatusModel(BaseModel):
    name: str
    available: bool


class StatusConfigModel(BaseModel):
    order: list[str]
    azureModel: str | None = None
    azureModel2: str | None = None
    geminiModel: str | None = None
    deepseekModel: str | None = None


class ProviderStatusReport(BaseModel):
    ok: bool
    providers: list[ProviderStatusModel]
    config: StatusConfigModel
    timestamp: datetime


def _status_config(router: FailoverRouter, cfg: AppConfig) -> StatusConfigModel:
    slots = cfg.providers
    return StatusConfigModel(
        order=router.configured(),
        azureModel=slots.azure_openai_primary.model if slots.azure_openai_primary else None,
        azureModel2=slots.azure_openai_secondary.model if slots.azure_openai_secondary else None,
        geminiModel=slots.gemini.model if slots.gemini else None,
        deepseekModel=slots.deepseek.model if slots.deepseek else None,
    )


async def provider_status_report(router: FailoverRouter, cfg: AppConfig) -> ProviderStatusReport:
    """Probe every configured provider for health endpoints. Never used for routing."""
    statuses = await router.get_provider_status()
    return ProviderStatusReport(
        ok=True,
        providers=[ProviderStatusModel(name=s.name, available=s.available) for s in statuses],
        config=_status_config(router, cfg),
        timestamp=datetime.now(timezone.utc),
    )


async def provider_status_payload(router: FailoverRouter, cfg: AppConfig) -> dict:
    return (await provider_status_report(router, cfg)).model_dump(mode="json")
