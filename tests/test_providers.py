import os
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
from google.genai import errors

from app.ai.config import load_ai_config
from app.ai.factory import get_ai_client
from app.ai.providers.gemini_provider import GeminiProvider
from app.ai.providers.openai_provider import OpenAIProvider
from app.core.errors import ConfigurationError, UpstreamError, UpstreamTransientError


class AIConfigTests(unittest.TestCase):
    def test_defaults_to_gemini(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "", "AI_MODEL": "", "GEMINI_API_KEY": "k"}):
            cfg = load_ai_config()
        self.assertEqual(cfg.provider, "gemini")
        self.assertEqual(cfg.model, "gemini-2.0-flash")
        self.assertEqual(cfg.api_key, "k")
        self.assertEqual(cfg.max_output_tokens, 8192)

    def test_legacy_gemini_key_name(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "gemini", "GEMINI_API_KEY": "", "GEMINI_KEY": "legacy"}):
            self.assertEqual(load_ai_config().api_key, "legacy")

    def test_tuning_values_from_env(self):
        env = {"AI_PROVIDER": "openai", "AI_MODEL": "", "AI_TEMPERATURE": "0.1", "AI_TOP_P": "0.8"}
        with patch.dict(os.environ, env):
            cfg = load_ai_config()
        self.assertEqual(cfg.model, "gpt-4o-mini")
        self.assertEqual(cfg.temperature, 0.1)
        self.assertEqual(cfg.top_p, 0.8)

    def test_unknown_provider_is_a_configuration_error(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "llama"}):
            with self.assertRaises(ConfigurationError):
                get_ai_client()

    def test_missing_key_is_a_configuration_error(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "gemini", "GEMINI_API_KEY": "", "GEMINI_KEY": ""}):
            with self.assertRaises(ConfigurationError) as ctx:
                get_ai_client()
        self.assertEqual(ctx.exception.public_message, "service configuration error")
        self.assertNotIn("GEMINI", ctx.exception.public_message)


class GeminiProviderTests(unittest.IsolatedAsyncioTestCase):
    def _provider(self, mock_cls):
        mock_client = MagicMock()
        mock_client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text="reply"))
        mock_cls.return_value = mock_client
        return GeminiProvider(model="gemini-2.0-flash", api_key="key"), mock_client

    async def test_complete_returns_text_and_passes_config(self):
        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            text = await provider.complete("prompt")

        self.assertEqual(text, "reply")
        mock_cls.assert_called_once_with(api_key="key")
        kwargs = mock_client.aio.models.generate_content.await_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-2.0-flash")
        self.assertEqual(kwargs["contents"], "prompt")
        self.assertEqual(kwargs["config"].max_output_tokens, 8192)

    async def test_api_errors_are_classified_by_code(self):
        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            mock_client.aio.models.generate_content.side_effect = errors.ServerError(
                503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}}
            )
            with self.assertRaises(UpstreamTransientError) as ctx:
                await provider.complete("prompt")
        self.assertEqual(ctx.exception.upstream_status, 503)

        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            mock_client.aio.models.generate_content.side_effect = errors.ClientError(
                400, {"error": {"message": "bad", "status": "INVALID_ARGUMENT"}}
            )
            with self.assertRaises(UpstreamError) as ctx:
                await provider.complete("prompt")
        self.assertNotIsInstance(ctx.exception, UpstreamTransientError)

    async def test_transport_failure_becomes_upstream_error(self):
        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            mock_client.aio.models.generate_content.side_effect = httpx.ConnectError("connection refused")
            with self.assertRaises(UpstreamError) as ctx:
                await provider.complete("prompt")
        self.assertNotIsInstance(ctx.exception, UpstreamTransientError)
        self.assertIsInstance(ctx.exception.__cause__, httpx.ConnectError)

        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            mock_client.aio.models.generate_content.side_effect = httpx.ReadTimeout("read timed out")
            with self.assertRaises(UpstreamError):
                await provider.complete("prompt")

    async def test_empty_text_becomes_empty_string(self):
        with patch("app.ai.providers.gemini_provider.genai.Client") as mock_cls:
            provider, mock_client = self._provider(mock_cls)
            mock_client.aio.models.generate_content.return_value = SimpleNamespace(text=None)
            self.assertEqual(await provider.complete("prompt"), "")


class OpenAIProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_complete_disables_sdk_retries(self):
        with patch("app.ai.providers.openai_provider.AsyncOpenAI") as mock_cls:
            mock_client = MagicMock()
            message = SimpleNamespace(content="reply")
            mock_client.chat.completions.create = AsyncMock(
                return_value=SimpleNamespace(choices=[SimpleNamespace(message=message)])
            )
            mock_cls.return_value = mock_client

            provider = OpenAIProvider(model="gpt-4o-mini", api_key="key")
            text = await provider.complete("prompt")

        self.assertEqual(text, "reply")
        self.assertEqual(mock_cls.call_args.kwargs["max_retries"], 0)
        kwargs = mock_client.chat.completions.create.await_args.kwargs
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "prompt"}])

    async def test_rate_limit_status_is_transient(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(429, request=request)
        with patch("app.ai.providers.openai_provider.AsyncOpenAI") as mock_cls:
            mock_client = MagicMock()
            mock_client.chat.completions.create = AsyncMock(
                side_effect=openai.RateLimitError("slow down", response=response, body=None)
            )
            mock_cls.return_value = mock_client

            provider = OpenAIProvider(model="gpt-4o-mini", api_key="key")
            with self.assertRaises(UpstreamTransientError) as ctx:
                await provider.complete("prompt")
        self.assertEqual(ctx.exception.upstream_status, 429)

    async def test_connection_error_becomes_upstream_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        with patch("app.ai.providers.openai_provider.AsyncOpenAI") as mock_cls:
            mock_client = MagicMock()
            mock_client.chat.completions.create = AsyncMock(
                side_effect=openai.APIConnectionError(request=request)
            )
            mock_cls.return_value = mock_client

            provider = OpenAIProvider(model="gpt-4o-mini", api_key="key")
            with self.assertRaises(UpstreamError) as ctx:
                await provider.complete("prompt")
        self.assertIsNone(ctx.exception.upstream_status)

    def test_missing_key(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            with self.assertRaises(ConfigurationError):
                OpenAIProvider(model="gpt-4o-mini")


if __name__ == "__main__":
    unittest.main()
