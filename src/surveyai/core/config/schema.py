from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _require_http_url(value: str) -> str:
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError("endpoint must be an http(s) URL")
    return value.rstrip("/")


class AzureOpenAIConfig(BaseModel):
    endpoint: str
    api_key: str = Field(repr=False)
    deployment: str = "model-router"
    api_version: str = "2024-06-01"
    model: str = "gpt-4o-mini"

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, endpoint: str) -> str:
        return _require_http_url(endpoint)


class GeminiConfig(BaseModel):
    api_key: str = Field(repr=False)
    model: str = "gemini-1.5-flash-latest"


class DeepSeekConfig(BaseModel):
    api_key: str = Field(repr=False)
    model: str = "deepseek-chat"


class ProvidersConfig(BaseModel):
    order: list[str] = Field(default_factory=list)
    azure_openai_primary: AzureOpenAIConfig | None = None
    azure_openai_secondary: AzureOpenAIConfig | None = None
    gemini: GeminiConfig | None = None
    deepseek: DeepSeekConfig | None = None


class GenerationDefaults(BaseModel):
    temperature: float = Field(0.2, ge=0.0, le=2.0)
    top_p: float = Field(0.9, ge=0.0, le=1.0)


class RuntimeConfig(BaseModel):
    request_timeout_seconds: float = Field(30.0, gt=0)
    probe_timeout_seconds: float = Field(10.0, gt=0)


class TelemetryConfig(BaseModel):
    log_level: LogLevel = "INFO"
    json_logs: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class AppConfig(BaseModel):
    environment: str = "dev"
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    generation: GenerationDefaults = Field(default_factory=GenerationDefaults)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
