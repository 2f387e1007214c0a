from app.ai.config import AIConfig, load_ai_config
from app.ai.types import AIClient

from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.gemini_provider import GeminiProvider
from app.core.errors import ConfigurationError


def get_ai_client(cfg: AIConfig | None = None) -> AIClient:
    cfg = cfg or load_ai_config()

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            temperature=cfg.temperature,
            top_p=cfg.top_p,
            max_output_tokens=cfg.max_output_tokens,
        )

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            temperature=cfg.temperature,
            top_p=cfg.top_p,
            max_output_tokens=cfg.max_output_tokens,
        )

    raise ConfigurationError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
