from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    log_message_max_chars: int
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    trust_x_forwarded_for: bool
    enhance_cooldown_s: float
    cooldown_entry_ttl_s: float
    cooldown_sweep_interval_s: float
    generation_timeout_s: float
    generation_max_retries: int
    generation_base_delay_s: float
    saved_resumes_db_path: str


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    log_message_max_chars=_get_env_int("LOG_MESSAGE_MAX_CHARS", 800),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
    enhance_cooldown_s=_get_env_float("ENHANCE_COOLDOWN_S", 5.0),
    cooldown_entry_ttl_s=_get_env_float("COOLDOWN_ENTRY_TTL_S", 300.0),
    cooldown_sweep_interval_s=_get_env_float("COOLDOWN_SWEEP_INTERVAL_S", 60.0),
    generation_timeout_s=_get_env_float("GENERATION_TIMEOUT_S", 540.0),
    generation_max_retries=_get_env_int("GENERATION_MAX_RETRIES", 3),
    generation_base_delay_s=_get_env_float("GENERATION_BASE_DELAY_S", 1.0),
    saved_resumes_db_path=(
        _get_env("SAVED_RESUMES_DB_PATH", "data/saved_resumes.db") or "data/saved_resumes.db"
    ),
)

if settings.enhance_cooldown_s < 0:
    raise RuntimeError("ENHANCE_COOLDOWN_S must not be negative.")

if settings.generation_timeout_s <= 0:
    raise RuntimeError("GENERATION_TIMEOUT_S must be positive.")
