import asyncio
import json
import logging
import re
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from pydantic import BaseModel

from app.agent.errors import (
    GenerationAuthError,
    GenerationError,
    GenerationFormatError,
    GenerationHttpError,
    GenerationShapeError,
)
from app.core.config import settings

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429
MAX_TEMPERATURE = 1.0


class GenerationOptions(BaseModel):
    temperature: float = 0.7
    max_output_tokens: int = 8000
    expect_json: bool = True


def _strip_code_fences(text: str) -> str:
    if not text:
        return ""
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```\s*$", "", cleaned)
    return cleaned.strip()


def parse_json_payload(text: str) -> Any:
    """Strict parse first, then one more attempt with code fences removed."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as first_error:
        logger.warning("JSON parse error, attempting to strip code fences: %s", first_error)

    cleaned = _strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to fix JSON payload: %s", cleaned[:500])
        raise GenerationFormatError("Failed to parse JSON response from generation backend") from e


class LLMClient:
    """Client for the text-generation backend, spoken to through its OpenAI-compatible API."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT

        # Use LLM_API_KEY or fall back to GEMINI_API_KEY
        resolved_api_key = api_key or settings.LLM_API_KEY or settings.GEMINI_API_KEY
        resolved_base_url = base_url or settings.LLM_BASE_URL

        self.client: AsyncOpenAI | None = None
        if resolved_api_key:
            # Retries are handled by generate_with_retry, not by the SDK.
            self.client = AsyncOpenAI(
                base_url=resolved_base_url,
                api_key=resolved_api_key,
                max_retries=0,
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )

    async def generate(self, prompt: str, options: GenerationOptions | None = None) -> Any:
        """
        Send one prompt to the backend and return the parsed JSON payload
        (or stripped text when `expect_json` is off). Never retries.
        """
        options = options or GenerationOptions()
        if self.client is None:
            raise GenerationAuthError("Missing LLM_API_KEY / GEMINI_API_KEY for the generation backend")

        request_kwargs: dict[str, Any] = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": options.temperature,
            "max_tokens": options.max_output_tokens,
        }
        if options.expect_json:
            request_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**request_kwargs)
        except APIStatusError as e:
            raise GenerationHttpError(
                f"Generation backend error: {e.status_code}", status=e.status_code
            ) from e
        except APIConnectionError as e:
            raise GenerationHttpError(f"Generation backend unreachable: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            logger.error("Received invalid response structure from %s: %s", self.model_name, response)
            raise GenerationShapeError("Invalid response format from generation backend")

        message = getattr(choices[0], "message", None)
        text = getattr(message, "content", None)
        if not isinstance(text, str) or not text:
            raise GenerationShapeError("Generation backend returned no text content")

        if options.expect_json:
            return parse_json_payload(text)
        return text.strip()

    async def generate_with_retry(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
        *,
        max_attempts: int | None = None,
    ) -> Any:
        """
        Call `generate` up to `max_attempts` times. Rate limits back off
        exponentially (1s, 2s, ...); unparseable JSON is resubmitted after a
        short pause with a slightly higher temperature. Anything else propagates.
        """
        options = options or GenerationOptions()
        attempts = settings.GENERATION_MAX_ATTEMPTS if max_attempts is None else max_attempts

        last_error: Exception | None = None
        for attempt in range(attempts):
            is_last_attempt = attempt == attempts - 1
            try:
                logger.info(
                    "Issuing generation request to model %s (attempt %s/%s)...",
                    self.model_name,
                    attempt + 1,
                    attempts,
                )
                return await self.generate(prompt, options)
            except GenerationHttpError as e:
                last_error = e
                if e.status == RATE_LIMIT_STATUS and not is_last_attempt:
                    wait_seconds = 2 ** attempt
                    logger.warning(
                        "Rate limited. Waiting %ss before retry %s/%s...",
                        wait_seconds,
                        attempt + 1,
                        attempts,
                    )
                    await asyncio.sleep(wait_seconds)
                    continue
                raise
            except GenerationFormatError as e:
                last_error = e
                if not is_last_attempt:
                    bumped = min(
                        options.temperature + settings.FORMAT_RETRY_TEMPERATURE_STEP,
                        MAX_TEMPERATURE,
                    )
                    logger.warning(
                        "JSON parse error. Retrying %s/%s with temperature %.2f...",
                        attempt + 1,
                        attempts,
                        bumped,
                    )
                    options = options.model_copy(update={"temperature": bumped})
                    await asyncio.sleep(settings.FORMAT_RETRY_DELAY_SECONDS)
                    continue
                raise

        # Defensive fallback (should be unreachable because loop either returns or raises).
        if last_error:
            raise last_error
        raise GenerationError("Max retries exceeded")
