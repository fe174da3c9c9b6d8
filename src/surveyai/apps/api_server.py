from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from surveyai import __version__
from surveyai.apps.runtime_support import AIRuntime, build_ai_runtime
from surveyai.cli import base_parser
from surveyai.core.providers.base import RequestOptions
from surveyai.core.providers.health import ProviderStatusReport, provider_status_report
from surveyai.core.runtime.errors import AIServiceUnavailableError
from surveyai.core.telemetry.logging import get_logger


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    max_tokens: int | None = Field(None, ge=1)
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    top_p: float | None = Field(None, ge=0.0, le=1.0)
    system_prompt: str | None = None
    model: str | None = None

    def to_options(self) -> RequestOptions:
        return RequestOptions(
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
            system_prompt=self.system_prompt,
            model=self.model,
        )


class GenerateResponse(BaseModel):
    ok: bool = True
    response: str
    provider: str


def create_app(runtime: AIRuntime | None = None) -> FastAPI:
    runtime = runtime or build_ai_runtime()
    logger = get_logger("surveyai.api")
    app = FastAPI(title="SurveyAI API", version=__version__)

    @app.get("/health")
    def health() -> dict:
        return {
            "status": "ok",
            "version": __version__,
            "environment": runtime.cfg.environment,
            "providers": runtime.router.configured(),
        }

    @app.get("/ai/status", response_model=ProviderStatusReport)
    async def ai_status() -> ProviderStatusReport:
        return await provider_status_report(runtime.router, runtime.cfg)

    @app.post("/ai/generate", response_model=GenerateResponse)
    async def ai_generate(payload: GenerateRequest):
        try:
            result = await runtime.router.generate_response(payload.prompt, payload.to_options())
        except AIServiceUnavailableError as exc:
            logger.warning("generate_unavailable", error_type=exc.__class__.__name__)
            return JSONResponse(status_code=503, content={"ok": False, "error": str(exc)})
        return GenerateResponse(response=result.text, provider=result.provider)

    return app


def main() -> int:
    parser = base_parser("surveyai-api", "SurveyAI generation API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    api = create_app()
    uvicorn.run(api, host=args.host, port=args.port, log_level="info")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
