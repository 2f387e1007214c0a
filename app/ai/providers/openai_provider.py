from __future__ import annotations

import os
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from app.ai.types import ChatMessage
from app.core.errors import ConfigurationError, UpstreamError, upstream_error


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        top_p: float = 0.9,
        max_output_tokens: int = 8192,
    ):
        self._model = model
        self._temperature = temperature
        self._top_p = top_p
        self._max_output_tokens = max_output_tokens
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise ConfigurationError("OPENAI_API_KEY is missing")

        # Retries and the overall timeout belong to GenerationClient.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            max_retries=0,
        )

    async def complete(self, prompt: str) -> str:
        messages = [ChatMessage(role="user", content=prompt)]
        payload = [{"role": m.role, "content": m.content} for m in messages]

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=self._temperature,
                top_p=self._top_p,
                max_tokens=self._max_output_tokens,
            )
        except openai.APIStatusError as exc:
            raise upstream_error(f"openai request failed: {exc}", exc.status_code) from exc
        except openai.APIConnectionError as exc:
            raise UpstreamError(f"openai connection failed: {exc}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"openai transport failed: {exc!r}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
