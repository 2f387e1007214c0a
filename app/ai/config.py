import os
from dataclasses import dataclass

_DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None = None
    temperature: float = 0.2
    top_p: float = 0.9
    max_output_tokens: int = 8192


def _api_key_for(provider: str) -> str | None:
    if provider == "gemini":
        raw = os.getenv("GEMINI_API_KEY") or os.getenv("GEMINI_KEY") or ""
    elif provider == "openai":
        raw = os.getenv("OPENAI_API_KEY") or ""
    else:
        raw = ""
    return raw.strip() or None


def load_ai_config() -> AIConfig:
    provider = (os.getenv("AI_PROVIDER") or "gemini").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(
        provider=provider,
        model=model,
        api_key=_api_key_for(provider),
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        temperature=_env_float("AI_TEMPERATURE", 0.2),
        top_p=_env_float("AI_TOP_P", 0.9),
        max_output_tokens=_env_int("AI_MAX_OUTPUT_TOKENS", 8192),
    )
