import asyncio
import unittest
from unittest.mock import AsyncMock, call

from app.ai.generation import GenerationClient
from app.core.errors import UpstreamError, UpstreamTransientError, upstream_error


class ScriptedProvider:
    """Raises or returns the scripted outcomes in order."""

    def __init__(self, *outcomes):
        self._outcomes = list(outcomes)
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class SlowProvider:
    def __init__(self):
        self.cancelled = False

    async def complete(self, prompt: str) -> str:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return "late"


class GenerationClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_retries_transient_failures_then_succeeds(self):
        provider = ScriptedProvider(
            upstream_error("service unavailable", 503),
            upstream_error("service unavailable", 503),
            "<analysis></analysis>",
        )
        sleep = AsyncMock()
        client = GenerationClient(provider, sleep=sleep)

        reply = await client.generate("prompt")

        self.assertEqual(reply, "<analysis></analysis>")
        self.assertEqual(provider.calls, 3)
        self.assertEqual(sleep.await_args_list, [call(1.0), call(2.0)])

    async def test_rate_limited_status_is_retried(self):
        provider = ScriptedProvider(upstream_error("quota", 429), "ok")
        sleep = AsyncMock()

        reply = await GenerationClient(provider, sleep=sleep).generate("prompt")

        self.assertEqual(reply, "ok")
        self.assertEqual(sleep.await_count, 1)

    async def test_non_transient_error_is_not_retried(self):
        provider = ScriptedProvider(upstream_error("bad request", 400), "never")
        sleep = AsyncMock()

        with self.assertRaises(UpstreamError) as ctx:
            await GenerationClient(provider, sleep=sleep).generate("prompt")

        self.assertNotIsInstance(ctx.exception, UpstreamTransientError)
        self.assertEqual(provider.calls, 1)
        sleep.assert_not_awaited()

    async def test_unexpected_exception_is_not_retried(self):
        provider = ScriptedProvider(RuntimeError("boom"))
        sleep = AsyncMock()

        with self.assertRaises(RuntimeError):
            await GenerationClient(provider, sleep=sleep).generate("prompt")
        sleep.assert_not_awaited()

    async def test_last_error_propagates_after_retries_exhausted(self):
        errors = [upstream_error(f"unavailable #{i}", 503) for i in range(4)]
        provider = ScriptedProvider(*errors)
        sleep = AsyncMock()

        with self.assertRaises(UpstreamTransientError) as ctx:
            await GenerationClient(provider, max_retries=3, sleep=sleep).generate("prompt")

        self.assertIs(ctx.exception, errors[-1])
        self.assertEqual(provider.calls, 4)
        self.assertEqual(sleep.await_args_list, [call(1.0), call(2.0), call(4.0)])

    async def test_timeout_bounds_the_exchange_and_cancels_call(self):
        provider = SlowProvider()
        client = GenerationClient(provider, timeout_s=0.05)

        with self.assertRaises(UpstreamError) as ctx:
            await client.generate("prompt")

        self.assertEqual(ctx.exception.code, "upstream_timeout")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertTrue(provider.cancelled)


class UpstreamErrorClassificationTests(unittest.TestCase):
    def test_transient_statuses(self):
        self.assertIsInstance(upstream_error("x", 503), UpstreamTransientError)
        self.assertIsInstance(upstream_error("x", 429), UpstreamTransientError)
        for status in (None, 400, 401, 404, 500):
            self.assertNotIsInstance(upstream_error("x", status), UpstreamTransientError)

    def test_upstream_quota_maps_to_429(self):
        self.assertEqual(upstream_error("quota", 429).status_code, 429)
        self.assertEqual(upstream_error("down", 503).status_code, 500)


if __name__ == "__main__":
    unittest.main()
