from __future__ import annotations

import asyncio
import json

from surveyai.apps.runtime_support import build_ai_runtime
from surveyai.cli import base_parser
from surveyai.core.config.loader import load_app_config
from surveyai.core.providers.base import RequestOptions
from surveyai.core.providers.health import provider_status_payload
from surveyai.core.runtime.errors import AIServiceUnavailableError


def main() -> int:
    parser = base_parser("surveyai-diag", "SurveyAI provider diagnostics CLI")
    parser.add_argument("--validate-config", action="store_true")
    parser.add_argument("--provider-status", action="store_true")
    parser.add_argument("--generate", metavar="PROMPT", default=None, help="Send one prompt through the failover chain")
    parser.add_argument("--max-tokens", type=int, default=None)
    args = parser.parse_args()

    did_work = False

    if args.validate_config:
        did_work = True
        try:
            cfg = load_app_config()
        except ValueError as exc:
            print(f"config-invalid error={exc}")
            return 1
        slots = cfg.providers
        configured = [
            name
            for name in ("azure_openai_primary", "azure_openai_secondary", "gemini", "deepseek")
            if getattr(slots, name) is not None
        ]
        print(f"config-valid env={cfg.environment} configured={configured} order={slots.order or 'default'}")

    if not (args.provider_status or args.generate):
        if not did_work:
            print("diag-ready (use --validate-config/--provider-status/--generate)")
        return 0

    try:
        runtime = build_ai_runtime()
    except ValueError as exc:
        print(f"config-invalid error={exc}")
        return 1

    if args.provider_status:
        payload = asyncio.run(provider_status_payload(runtime.router, runtime.cfg))
        print(json.dumps(payload, indent=2))

    if args.generate:
        try:
            result = asyncio.run(
                runtime.router.generate_response(args.generate, RequestOptions(max_tokens=args.max_tokens))
            )
        except AIServiceUnavailableError as exc:
            print(f"generate-failed error={exc}")
            return 2
        print(f"provider={result.provider}")
        print(result.text)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
