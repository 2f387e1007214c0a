from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors, types

from app.core.errors import ConfigurationError, UpstreamError, upstream_error

logger = logging.getLogger(__name__)


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        temperature: float = 0.2,
        top_p: float = 0.9,
        max_output_tokens: int = 8192,
    ):
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is missing")
        self._model = model
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            top_p=top_p,
            max_output_tokens=max_output_tokens,
        )
        self._client = genai.Client(api_key=api_key)

    async def complete(self, prompt: str) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=self._config,
            )
        except errors.APIError as exc:
            raise upstream_error(f"gemini request failed: {exc}", exc.code) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"gemini connection failed: {exc!r}") from exc

        text = response.text or ""
        if not text:
            logger.warning("gemini_empty_response model=%s", self._model)
        return text
