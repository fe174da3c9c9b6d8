from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
PROVIDERS = ROOT / "src/surveyai/core/providers"


def test_router_never_branches_on_concrete_adapters():
    content = (PROVIDERS / "router.py").read_text(encoding="utf-8")
    for marker in ("azure_openai", "gemini", "deepseek", "isinstance("):
        assert marker not in content, f"router.py references {marker!r}"


def test_only_adapters_make_http_calls():
    disallowed: list[str] = []
    for py_file in (ROOT / "src/surveyai").rglob("*.py"):
        if py_file.parent == PROVIDERS and py_file.name in {"base.py"}:
            continue
        content = py_file.read_text(encoding="utf-8")
        if "httpx.AsyncClient" in content or "httpx.Client" in content:
            disallowed.append(str(py_file))
    assert disallowed == [], f"Direct HTTP client use outside adapter base: {disallowed}"


def test_no_module_level_router_singleton():
    for py_file in (ROOT / "src/surveyai").rglob("*.py"):
        for line in py_file.read_text(encoding="utf-8").splitlines():
            assert not line.startswith(("router = ", "ai_service = ", "app = create_app(")), str(py_file)
