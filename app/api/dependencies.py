from __future__ import annotations

from typing import Callable

from fastapi import Request

from app.ai.factory import get_ai_client
from app.ai.generation import GenerationClient
from app.core.config import settings
from app.core.cooldown_rate_limit import CooldownRateLimiter
from app.core.resume_store import SavedResumeStore

GenerationFactory = Callable[[], GenerationClient]


def get_cooldown_limiter(request: Request) -> CooldownRateLimiter:
    return request.app.state.cooldown_limiter


def get_resume_store(request: Request) -> SavedResumeStore:
    return request.app.state.resume_store


def build_generation_client() -> GenerationClient:
    return GenerationClient(
        get_ai_client(),
        max_retries=settings.generation_max_retries,
        base_delay_s=settings.generation_base_delay_s,
        timeout_s=settings.generation_timeout_s,
    )


def get_generation_factory() -> GenerationFactory:
    # Built lazily so a missing API key surfaces after input validation.
    return build_generation_client
