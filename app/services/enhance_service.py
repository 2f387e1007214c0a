from __future__ import annotations

import logging
import time
from typing import Callable

from app.ai.generation import GenerationClient
from app.core.config import settings
from app.core.cooldown_rate_limit import CooldownRateLimiter
from app.core.errors import MalformedResponseError, RateLimitError, UpstreamError
from app.parsing.models import EnhancementResult
from app.parsing.parse import parse_enhancement_reply
from app.services.prompt import build_prompt
from app.services.sanitizer import sanitize
from app.services.validation import validate_enhancement_request

logger = logging.getLogger("app.enhance")


def _preview(text: str) -> str:
    limit = max(0, settings.log_message_max_chars)
    clipped = text if len(text) <= limit else text[:limit] + "..."
    return sanitize(clipped)


async def enhance_resume(
    resume_source: str | None,
    job_description: str | None,
    *,
    client_id: str,
    cooldown: CooldownRateLimiter,
    make_generation: Callable[[], GenerationClient],
) -> EnhancementResult:
    validate_enhancement_request(resume_source, job_description)
    try:
        cooldown.check(client_id)
    except RateLimitError:
        logger.info("enhance_cooldown_rejected client=%s", client_id)
        raise

    prompt = build_prompt(resume_source, job_description)
    generation = make_generation()
    started = time.perf_counter()
    try:
        reply = await generation.generate(prompt)
    except UpstreamError as exc:
        logger.warning(
            "enhance_upstream_failed client=%s status=%s: %s",
            client_id,
            exc.upstream_status,
            exc,
        )
        raise
    latency_ms = int((time.perf_counter() - started) * 1000)

    try:
        result = parse_enhancement_reply(reply)
    except MalformedResponseError:
        logger.error(
            "enhance_malformed_reply client=%s reply_len=%s reply=\"%s\"",
            client_id,
            len(reply),
            _preview(reply),
        )
        raise

    if not result.rewritten_resume:
        logger.error(
            "enhance_missing_rewrite client=%s reply_len=%s reply=\"%s\"",
            client_id,
            len(reply),
            _preview(reply),
        )
        raise MalformedResponseError("missing rewritten resume")

    logger.info(
        "enhance_completed client=%s score=%s enhanced=%s removed=%s latency_ms=%s",
        client_id,
        result.match_score,
        len(result.enhanced_parts),
        len(result.removed_parts),
        latency_ms,
    )
    return result
