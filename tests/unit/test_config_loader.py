from __future__ import annotations

import pytest

from surveyai.core.config.loader import load_app_config

FULL_ENV = {
    "AZURE_OPENAI_ENDPOINT": "https://primary.openai.azure.com/",
    "AZURE_OPENAI_API_KEY": "key-1",
    "AZURE_OPENAI_ENDPOINT_2": "https://secondary.openai.azure.com",
    "AZURE_OPENAI_API_KEY_2": "key-2",
    "GEMINI_API_KEY": "gem-key",
    "DEEPSEEK_API_KEY": "ds-key",
}


def test_empty_environment_gives_no_providers_and_defaults():
    cfg = load_app_config({})
    slots = cfg.providers
    assert slots.azure_openai_primary is None
    assert slots.azure_openai_secondary is None
    assert slots.gemini is None
    assert slots.deepseek is None
    assert slots.order == []
    assert cfg.generation.temperature == 0.2
    assert cfg.generation.top_p == 0.9
    assert cfg.runtime.request_timeout_seconds == 30.0


def test_full_environment_populates_every_slot_with_defaults():
    cfg = load_app_config(FULL_ENV)
    primary = cfg.providers.azure_openai_primary
    secondary = cfg.providers.azure_openai_secondary
    assert primary.endpoint == "https://primary.openai.azure.com"
    assert primary.deployment == "model-router"
    assert primary.api_version == "2024-06-01"
    assert primary.model == "gpt-4o-mini"
    assert secondary.model == "gpt-4o"
    assert cfg.providers.gemini.model == "gemini-1.5-flash-latest"
    assert cfg.providers.deepseek.model == "deepseek-chat"


def test_secondary_inherits_shared_api_version():
    env = dict(FULL_ENV, AZURE_OPENAI_API_VERSION="2025-01-01")
    cfg = load_app_config(env)
    assert cfg.providers.azure_openai_primary.api_version == "2025-01-01"
    assert cfg.providers.azure_openai_secondary.api_version == "2025-01-01"


def test_partial_azure_credentials_leave_slot_absent():
    cfg = load_app_config({"AZURE_OPENAI_ENDPOINT": "https://x.openai.azure.com", "AZURE_OPENAI_API_KEY": "  "})
    assert cfg.providers.azure_openai_primary is None


def test_order_list_is_split_and_trimmed():
    cfg = load_app_config({"AI_PROVIDER_ORDER": " gemini, deepseek ,,azure_openai_primary "})
    assert cfg.providers.order == ["gemini", "deepseek", "azure_openai_primary"]


def test_api_keys_hidden_from_repr():
    cfg = load_app_config(FULL_ENV)
    assert "gem-key" not in repr(cfg)
    assert "key-1" not in repr(cfg)


@pytest.mark.parametrize(
    "env",
    [
        {"AI_TEMPERATURE": "warm"},
        {"AI_TOP_P": "1.5"},
        {"AI_REQUEST_TIMEOUT_SECONDS": "0"},
        {"SURVEYAI_LOG_LEVEL": "verbose"},
        {"AZURE_OPENAI_ENDPOINT": "primary.openai.azure.com", "AZURE_OPENAI_API_KEY": "k"},
    ],
)
def test_malformed_values_fail_fast(env):
    with pytest.raises(ValueError, match="Invalid SurveyAI configuration"):
        load_app_config(env)


def test_log_level_is_normalised():
    cfg = load_app_config({"SURVEYAI_LOG_LEVEL": " debug ", "SURVEYAI_JSON_LOGS": "false"})
    assert cfg.telemetry.log_level == "DEBUG"
    assert cfg.telemetry.json_logs is False
