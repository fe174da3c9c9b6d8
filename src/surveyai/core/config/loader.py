from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from surveyai.core.config.schema import AppConfig


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _put(target: dict[str, Any], key: str, value: str | None) -> None:
    if value is not None:
        target[key] = value


def _split_order(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _azure_slot(env: Mapping[str, str], suffix: str) -> dict[str, Any] | None:
    endpoint = _get(env, f"AZURE_OPENAI_ENDPOINT{suffix}")
    api_key = _get(env, f"AZURE_OPENAI_API_KEY{suffix}")
    if not endpoint or not api_key:
        return None
    slot: dict[str, Any] = {"endpoint": endpoint, "api_key": api_key}
    _put(slot, "deployment", _get(env, f"AZURE_OPENAI_DEPLOYMENT_NAME{suffix}"))
    _put(slot, "api_version", _get(env, f"AZURE_OPENAI_API_VERSION{suffix}") or _get(env, "AZURE_OPENAI_API_VERSION"))
    _put(slot, "model", _get(env, f"AZURE_OPENAI_MODEL{suffix}"))
    return slot


def _keyed_slot(env: Mapping[str, str], key_var: str, model_var: str) -> dict[str, Any] | None:
    api_key = _get(env, key_var)
    if not api_key:
        return None
    slot: dict[str, Any] = {"api_key": api_key}
    _put(slot, "model", _get(env, model_var))
    return slot


def config_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    secondary = _azure_slot(env, "_2")
    if secondary is not None and "model" not in secondary:
        secondary["model"] = "gpt-4o"

    providers: dict[str, Any] = {
        "order": _split_order(_get(env, "AI_PROVIDER_ORDER")),
        "azure_openai_primary": _azure_slot(env, ""),
        "azure_openai_secondary": secondary,
        "gemini": _keyed_slot(env, "GEMINI_API_KEY", "GEMINI_MODEL"),
        "deepseek": _keyed_slot(env, "DEEPSEEK_API_KEY", "DEEPSEEK_MODEL"),
    }

    generation: dict[str, Any] = {}
    _put(generation, "temperature", _get(env, "AI_TEMPERATURE"))
    _put(generation, "top_p", _get(env, "AI_TOP_P"))

    runtime: dict[str, Any] = {}
    _put(runtime, "request_timeout_seconds", _get(env, "AI_REQUEST_TIMEOUT_SECONDS"))
    _put(runtime, "probe_timeout_seconds", _get(env, "AI_PROBE_TIMEOUT_SECONDS"))

    telemetry: dict[str, Any] = {}
    _put(telemetry, "log_level", _get(env, "SURVEYAI_LOG_LEVEL"))
    _put(telemetry, "json_logs", _get(env, "SURVEYAI_JSON_LOGS"))

    merged: dict[str, Any] = {
        "providers": providers,
        "generation": generation,
        "runtime": runtime,
        "telemetry": telemetry,
    }
    _put(merged, "environment", _get(env, "SURVEYAI_ENVIRONMENT"))
    return merged


def load_app_config(env: Mapping[str, str] | None = None) -> AppConfig:
    source = os.environ if env is None else env
    try:
        return AppConfig.model_validate(config_from_env(source))
    except ValidationError as exc:
        raise ValueError(f"Invalid SurveyAI configuration: {exc}") from exc
