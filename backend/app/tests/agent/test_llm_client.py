import unittest
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from openai import APIConnectionError, InternalServerError, RateLimitError

from app.agent.errors import (
    GenerationAuthError,
    GenerationError,
    GenerationFormatError,
    GenerationHttpError,
    GenerationShapeError,
)
from app.agent.llm_client import GenerationOptions, LLMClient, parse_json_payload
from app.tests.conftest import make_completion, make_openai_client

REQUEST = httpx.Request("POST", "https://llm.example/v1/chat/completions")


def _rate_limit_error() -> RateLimitError:
    return RateLimitError(
        "Too Many Requests",
        response=httpx.Response(429, request=REQUEST),
        body=None,
    )


def _client_with(create: AsyncMock) -> LLMClient:
    with patch("app.agent.llm_client.AsyncOpenAI", return_value=make_openai_client(create)):
        return LLMClient(model_name="test-model", api_key="dummy_key")


@pytest.mark.asyncio
async def test_llm_client_json_parsing():
    create = AsyncMock(return_value=make_completion('{"pages": [{"url_path": "/"}]}'))

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=make_openai_client(create)):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")
            result = await client.generate("Build a sitemap", GenerationOptions(temperature=0.3))

    assert result == {"pages": [{"url_path": "/"}]}
    create.assert_called_once()
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["temperature"] == 0.3
    assert kwargs["max_tokens"] == 8000
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"] == [{"role": "user", "content": "Build a sitemap"}]


@pytest.mark.asyncio
async def test_llm_client_strips_code_fences():
    create = AsyncMock(return_value=make_completion('```json\n{"h1": "หวยฮานอย {brand}"}\n```'))
    client = _client_with(create)

    result = await client.generate("brief")

    assert result == {"h1": "หวยฮานอย {brand}"}


@pytest.mark.asyncio
async def test_llm_client_raises_format_error_for_unparseable_text():
    create = AsyncMock(return_value=make_completion("Sure! Here is your sitemap: pages..."))
    client = _client_with(create)

    with pytest.raises(GenerationFormatError):
        await client.generate("structure")


@pytest.mark.asyncio
async def test_llm_client_plain_text_mode_skips_json_parsing():
    create = AsyncMock(return_value=make_completion("  just text  "))
    client = _client_with(create)

    result = await client.generate("hello", GenerationOptions(expect_json=False))

    assert result == "just text"
    assert "response_format" not in create.call_args.kwargs


@pytest.mark.asyncio
async def test_llm_client_requires_credentials():
    with patch("app.agent.llm_client.settings.LLM_API_KEY", None), patch(
        "app.agent.llm_client.settings.GEMINI_API_KEY", None
    ):
        client = LLMClient(model_name="test-model")

    with pytest.raises(GenerationAuthError):
        await client.generate("structure")


@pytest.mark.asyncio
async def test_llm_client_maps_http_status():
    create = AsyncMock(side_effect=_rate_limit_error())
    client = _client_with(create)

    with pytest.raises(GenerationHttpError) as exc_info:
        await client.generate("structure")

    assert exc_info.value.status == 429


@pytest.mark.asyncio
async def test_llm_client_maps_connection_failures():
    create = AsyncMock(side_effect=APIConnectionError(request=REQUEST))
    client = _client_with(create)

    with pytest.raises(GenerationHttpError) as exc_info:
        await client.generate("structure")

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_llm_client_rejects_response_without_text():
    create = AsyncMock(return_value=make_completion(None))
    client = _client_with(create)

    with pytest.raises(GenerationShapeError):
        await client.generate("structure")

    empty = make_completion("{}")
    empty.choices = []
    client = _client_with(AsyncMock(return_value=empty))
    with pytest.raises(GenerationShapeError):
        await client.generate("structure")


def test_parse_json_payload_handles_bare_fence():
    assert parse_json_payload('```\n[1, 2]\n```') == [1, 2]


class GenerateWithRetryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = _client_with(AsyncMock())
        sleep_patcher = patch("app.agent.llm_client.asyncio.sleep", new_callable=AsyncMock)
        self.sleep = sleep_patcher.start()
        self.addCleanup(sleep_patcher.stop)

    async def test_rate_limit_is_retried_with_exponential_backoff_then_surfaced(self):
        self.client.generate = AsyncMock(
            side_effect=GenerationHttpError("rate limited", status=429)
        )

        with self.assertRaises(GenerationHttpError) as ctx:
            await self.client.generate_with_retry("structure", max_attempts=3)

        self.assertEqual(ctx.exception.status, 429)
        self.assertEqual(self.client.generate.await_count, 3)
        self.assertEqual([call.args[0] for call in self.sleep.await_args_list], [1, 2])

    async def test_rate_limit_then_success(self):
        self.client.generate = AsyncMock(
            side_effect=[GenerationHttpError("rate limited", status=429), {"pages": []}]
        )

        result = await self.client.generate_with_retry("structure")

        self.assertEqual(result, {"pages": []})
        self.assertEqual(self.client.generate.await_count, 2)
        self.sleep.assert_awaited_once_with(1)

    async def test_format_error_retries_with_higher_temperature(self):
        self.client.generate = AsyncMock(
            side_effect=[GenerationFormatError("bad json"), {"h1": "ok"}]
        )

        result = await self.client.generate_with_retry(
            "brief", GenerationOptions(temperature=0.7), max_attempts=3
        )

        self.assertEqual(result, {"h1": "ok"})
        first_options = self.client.generate.await_args_list[0].args[1]
        second_options = self.client.generate.await_args_list[1].args[1]
        self.assertAlmostEqual(first_options.temperature, 0.7)
        self.assertAlmostEqual(second_options.temperature, 0.8)
        self.sleep.assert_awaited_once_with(0.5)

    async def test_format_error_on_final_attempt_propagates(self):
        self.client.generate = AsyncMock(side_effect=GenerationFormatError("bad json"))

        with self.assertRaises(GenerationFormatError):
            await self.client.generate_with_retry("brief", max_attempts=2)

        self.assertEqual(self.client.generate.await_count, 2)

    async def test_other_errors_are_not_retried(self):
        self.client.generate = AsyncMock(
            side_effect=GenerationHttpError("server error", status=500)
        )

        with self.assertRaises(GenerationHttpError):
            await self.client.generate_with_retry("structure", max_attempts=3)

        self.assertEqual(self.client.generate.await_count, 1)
        self.sleep.assert_not_awaited()

    async def test_auth_errors_are_not_retried(self):
        self.client.generate = AsyncMock(side_effect=GenerationAuthError("no key"))

        with self.assertRaises(GenerationAuthError):
            await self.client.generate_with_retry("structure")

        self.assertEqual(self.client.generate.await_count, 1)

    async def test_zero_attempts_raise_max_retries_exceeded(self):
        self.client.generate = AsyncMock()

        with self.assertRaises(GenerationError) as ctx:
            await self.client.generate_with_retry("structure", max_attempts=0)

        self.assertIn("Max retries exceeded", str(ctx.exception))
        self.client.generate.assert_not_awaited()

    async def test_attempts_default_to_settings(self):
        self.client.generate = AsyncMock(
            side_effect=GenerationHttpError("rate limited", status=429)
        )

        with patch("app.agent.llm_client.settings.GENERATION_MAX_ATTEMPTS", 2):
            with self.assertRaises(GenerationHttpError):
                await self.client.generate_with_retry("structure")

        self.assertEqual(self.client.generate.await_count, 2)
