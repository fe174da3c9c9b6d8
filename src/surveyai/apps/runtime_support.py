from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from surveyai.core.config.loader import load_app_config
from surveyai.core.config.schema import AppConfig
from surveyai.core.providers.registry import build_router
from surveyai.core.providers.router import FailoverRouter
from surveyai.core.telemetry.logging import configure_logging


@dataclass(slots=True, frozen=True)
class AIRuntime:
    cfg: AppConfig
    router: FailoverRouter


def build_ai_runtime(
    env: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AIRuntime:
    cfg = load_app_config(env)
    configure_logging(cfg.telemetry.log_level, json_logs=cfg.telemetry.json_logs)
    return AIRuntime(cfg=cfg, router=build_router(cfg, transport=transport))
