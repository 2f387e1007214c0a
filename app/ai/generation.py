"""Provider-agnostic generation with retry and an overall deadline."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.ai.types import AIClient
from app.core.errors import UpstreamError, UpstreamTransientError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class GenerationClient:
    """Send one prompt to a provider, retrying transient upstream failures.

    Only ``UpstreamTransientError`` (provider status 429 or 503) is retried,
    sequentially, with waits of ``base_delay_s * 2**n`` (1s, 2s, 4s by
    default). Any other error propagates at once; after the last retry the
    last error propagates. ``timeout_s`` bounds the whole exchange including
    waits, and cancels the in-flight call when it expires.
    """

    def __init__(
        self,
        provider: AIClient,
        *,
        max_retries: int = 3,
        base_delay_s: float = 1.0,
        timeout_s: float = 540.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self._provider = provider
        self._max_retries = max(0, max_retries)
        self._base_delay_s = base_delay_s
        self._timeout_s = timeout_s
        self._sleep = sleep

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=self._base_delay_s, exp_base=2),
            retry=retry_if_exception_type(UpstreamTransientError),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "generation_retry attempt=%s delay_s=%.1f status=%s",
            retry_state.attempt_number,
            delay,
            getattr(exc, "upstream_status", None),
        )

    async def _generate_with_retry(self, prompt: str) -> str:
        reply = ""
        async for attempt in self._retrying():
            with attempt:
                reply = await self._provider.complete(prompt)
        return reply

    async def generate(self, prompt: str) -> str:
        try:
            return await asyncio.wait_for(self._generate_with_retry(prompt), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            logger.error("generation_timeout timeout_s=%s prompt_len=%s", self._timeout_s, len(prompt))
            raise UpstreamError(
                f"generation exceeded {self._timeout_s}s",
                status_code=504,
                code="upstream_timeout",
            ) from exc
