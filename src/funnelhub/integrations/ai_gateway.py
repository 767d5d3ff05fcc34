"""OpenAI-compatible LLM gateway client.

Usage:
    gateway = get_ai_gateway()
    text = await gateway.complete("Write a blog post", system_prompt="You are ...")
    image_url = await gateway.generate_image("A hero image about ...")
"""

import json
import re
from functools import lru_cache
from typing import Any

from fastapi import status
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from src.funnelhub.core.config import get_settings
from src.funnelhub.core.exceptions import GenerationError
from src.funnelhub.core.logging import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add more credits."

_JSON_FENCE = re.compile(r"```json\n?|\n?```")


@lru_cache(maxsize=4)
def _get_openai_client(api_key: str, base_url: str, timeout: float) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)


def strip_json_fences(text: str) -> str:
    return _JSON_FENCE.sub("", text).strip()


def parse_json_content(text: str) -> Any:
    """Parse model output that may be wrapped in ```json fences."""
    try:
        return json.loads(strip_json_fences(text))
    except ValueError as e:
        logger.warning("AI gateway returned unparseable JSON", preview=text[:200])
        raise GenerationError(f"Invalid JSON in generated content: {e}") from e


def map_status_error(e: APIStatusError) -> GenerationError:
    if e.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        return GenerationError(RATE_LIMIT_MESSAGE, status.HTTP_429_TOO_MANY_REQUESTS)
    if e.status_code == status.HTTP_402_PAYMENT_REQUIRED:
        return GenerationError(CREDITS_EXHAUSTED_MESSAGE, status.HTTP_402_PAYMENT_REQUIRED)
    return GenerationError(f"AI gateway error: {e.status_code}")


class AIGateway:
    def __init__(self, client: AsyncOpenAI, text_model: str, image_model: str):
        self.client = client
        self.text_model = text_model
        self.image_model = image_model

    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        """Run a chat completion and return the message text.

        Raises:
            GenerationError: carrying 429/402 for gateway quota errors, 500 otherwise.
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            completion = await self.client.chat.completions.create(
                model=self.text_model,
                messages=messages,  # type: ignore[arg-type]
            )
        except APIStatusError as e:
            logger.error("AI gateway error", status=e.status_code, body=str(e.body)[:500])
            raise map_status_error(e) from e
        except APIConnectionError as e:
            logger.error("AI gateway unreachable", error=str(e))
            raise GenerationError(f"AI gateway unreachable: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise GenerationError("No content generated")
        return content

    async def generate_image(self, prompt: str) -> str | None:
        """Image URL (usually a data: URL) or None when generation fails."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.image_model,
                messages=[{"role": "user", "content": prompt}],
                extra_body={"modalities": ["image", "text"]},
            )
        except (APIStatusError, APIConnectionError) as e:
            logger.info("Image generation failed, continuing without image", error=str(e))
            return None

        payload = completion.model_dump()
        try:
            return payload["choices"][0]["message"]["images"][0]["image_url"]["url"]
        except (KeyError, IndexError, TypeError):
            logger.info("Image generation returned no image")
            return None


def get_ai_gateway() -> AIGateway | None:
    """Gateway configured from settings, or None without AI_GATEWAY_API_KEY."""
    settings = get_settings()
    if not settings.ai_gateway_api_key:
        return None
    client = _get_openai_client(
        settings.ai_gateway_api_key,
        settings.ai_gateway_url,
        settings.ai_request_timeout_seconds,
    )
    return AIGateway(client, settings.ai_text_model, settings.ai_image_model)
